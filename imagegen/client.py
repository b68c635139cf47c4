from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from typing import Any

from app.core.http import HttpClient, TransportError, UpstreamError
from imagegen.errors import SubmissionError
from llm.client import first_infer_request

logger = logging.getLogger(__name__)


def random_seed() -> str:
    return str(random.randrange(1_000_000_000_000))


@dataclass(frozen=True)
class StyleParameters:
    guidance: float = 3.5
    width: int = 512
    height: int = 512
    num_steps: int = 4
    seed: str | None = None


class ImageClient:
    """
    Submit/status calls for the hosted diffusion endpoint.

    Both endpoints wrap their payload in body.infer_requests[0].
    """

    def __init__(
        self,
        *,
        http: HttpClient,
        submit_url: str,
        status_url_base: str,
        style: StyleParameters | None = None,
    ) -> None:
        self.http = http
        self.submit_url = submit_url
        self.status_url_base = status_url_base.rstrip("/")
        self.style = style or StyleParameters()

    def submit(self, prompt: str, style: StyleParameters | None = None) -> str:
        params = asdict(style or self.style)
        params["seed"] = params.get("seed") or random_seed()
        body = {"input": {"prompt": prompt, **params}}

        try:
            data = self.http.post_json(self.submit_url, body)
        except (UpstreamError, TransportError) as e:
            raise SubmissionError(f"Failed to submit image generation request: {e}") from e

        infer_request = first_infer_request(data)
        request_id = infer_request.get("id") if infer_request else None
        if not request_id:
            raise SubmissionError("No request ID received from image generation API")

        logger.info("image job submitted request_id=%s", request_id)
        return str(request_id)

    def check_status(self, request_id: str) -> dict[str, Any]:
        data = self.http.get_json(f"{self.status_url_base}/{request_id}")
        return first_infer_request(data) or {}
