from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The request never produced an HTTP response (DNS, timeout, reset...)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url} failed: {cause}")


class UpstreamError(RuntimeError):
    """The dependency answered, but not with a usable 2xx JSON response."""

    def __init__(self, status_code: int, status_text: str, *, url: str | None = None) -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.url = url
        super().__init__(f"API request failed with status {status_code}: {status_text}")


class HttpClient:
    """
    Thin JSON-over-HTTP wrapper with bearer auth.

    - POST/GET with a JSON body and Authorization header
    - non-2xx -> UpstreamError(status_code, status_text)
    - transport failures -> TransportError (original exception attached)
    - no retries at this layer
    """

    def __init__(
        self,
        *,
        token: str | None = None,
        timeout_s: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def post_json(self, url: str, body: Any) -> Any:
        return self._request("POST", url, body=body)

    def get_json(self, url: str) -> Any:
        return self._request("GET", url)

    def _request(self, method: str, url: str, *, body: Any = None) -> Any:
        logger.debug("http %s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            logger.warning("http %s %s transport failure: %s", method, url, e)
            raise TransportError(url, e) from e

        if not 200 <= resp.status_code < 300:
            logger.warning("http %s %s -> %s %s", method, url, resp.status_code, resp.reason)
            raise UpstreamError(resp.status_code, resp.reason or "", url=url)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(resp.status_code, "invalid JSON body", url=url) from e

        logger.debug("http %s %s -> %s", method, url, resp.status_code)
        return data
