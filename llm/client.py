from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.config import ConfigurationError, Settings
from app.core.http import HttpClient, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMResult:
    output: dict[str, Any] = field(default_factory=dict)
    input: Any = None

    @property
    def message(self) -> str:
        value = self.output.get("message")
        return value if isinstance(value, str) else ""


def _get(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def strip_nft(messages: Iterable[Any]) -> list[dict[str, str]]:
    """
    Reduce each message to role+content before it leaves the process.
    Attached NFT descriptors (image URLs, hashes) are never forwarded.
    """
    return [{"role": _get(m, "role"), "content": _get(m, "content")} for m in messages]


class LLMClient:
    def __init__(
        self,
        *,
        url: str,
        http: HttpClient,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        top_p: float = 0.9,
        stream: bool = False,
    ) -> None:
        self.url = url
        self.http = http
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.top_p = top_p
        self.stream = stream

    def complete(self, messages: Iterable[Any]) -> LLMResult:
        return self._request(strip_nft(messages))

    def complete_with_prompt(self, messages: Iterable[Any], prompt: str) -> LLMResult:
        payload = [{"role": "system", "content": prompt}, *strip_nft(messages)]
        return self._request(payload)

    def _request(self, messages: list[dict[str, str]]) -> LLMResult:
        logger.info("LLM call start messages=%s", len(messages))
        body = {
            "input": {
                "max_tokens": self.max_tokens,
                "messages": messages,
                "stream": self.stream,
                "temperature": self.temperature,
                "top_p": self.top_p,
            }
        }
        data = self.http.post_json(self.url, body)
        infer_request = first_infer_request(data)
        if infer_request is None:
            raise UpstreamError(200, "malformed completion envelope", url=self.url)

        output = infer_request.get("output")
        if not isinstance(output, dict):
            output = {"message": output} if isinstance(output, str) else {}
        result = LLMResult(output=output, input=infer_request.get("input"))
        logger.info("LLM call success output_len=%s", len(result.message))
        return result


def first_infer_request(data: Any) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    body = data.get("body")
    if not isinstance(body, dict):
        return None
    infer_requests = body.get("infer_requests")
    if not isinstance(infer_requests, list) or not infer_requests:
        return None
    first = infer_requests[0]
    return first if isinstance(first, dict) else None


def build_llm_client(settings: Settings) -> LLMClient:
    if not settings.llm_url:
        raise ConfigurationError("LLM_URL")
    if not settings.API_TOKEN:
        raise ConfigurationError("ON_DEMAND_API_ACCESS_TOKEN")

    http = HttpClient(token=settings.API_TOKEN, timeout_s=settings.request_timeout_s)
    return LLMClient(
        url=settings.llm_url,
        http=http,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        top_p=settings.top_p,
        stream=settings.llm_stream,
    )
