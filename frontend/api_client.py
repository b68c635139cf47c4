from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

CHAT_PATH = "/chat"
MINT_PATH = "/mint"


class BackendClient:
    """HTTP calls from the chat page to the backend. Never raises on network errors."""

    def __init__(self, base_url: str, *, timeout_s: float = 620.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> tuple[bool, Any]:
        url = f"{self.base_url}{path}"
        try:
            logger.info("%s %s", method, url)
            resp = self.session.request(method, url, json=payload, timeout=self.timeout_s)
        except requests.RequestException as exc:
            logger.warning("EXC %s %s", url, exc)
            return False, {"error": str(exc)}

        try:
            data = resp.json()
        except ValueError:
            data = {"error": f"{resp.status_code} {resp.text}"}

        if resp.status_code >= 400:
            logger.warning("ERR %s %s", resp.status_code, url)
            if not isinstance(data, dict):
                data = {"error": f"{resp.status_code} {resp.text}"}
            return False, data
        return True, data

    def post_chat(self, payload: dict[str, Any]) -> tuple[bool, Any]:
        return self._request("POST", CHAT_PATH, payload)

    def post_mint(self, nft: dict[str, Any]) -> tuple[bool, Any]:
        return self._request("POST", MINT_PATH, nft)

    def health(self) -> tuple[bool, Any]:
        return self._request("GET", "/health")
