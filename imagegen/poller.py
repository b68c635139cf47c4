from __future__ import annotations

import logging
import time
from typing import Callable

from app.config import ConfigurationError, Settings
from app.core.http import HttpClient, TransportError, UpstreamError
from app.domain.job_state import TERMINAL, ImageGenerationJob, JobState, parse_state
from imagegen.client import ImageClient, StyleParameters
from imagegen.errors import (
    GenerationFailedError,
    GenerationTimeoutError,
    MalformedResultError,
    StatusCheckError,
)

logger = logging.getLogger(__name__)


class ImageJobPoller:
    """
    Submit-then-poll driver for one image job at a time.

    Each attempt waits `interval_s` and then issues exactly one status check.
    Terminal states end the loop. Pending states and transient failures
    (no response, or a 5xx) are retried until `max_attempts` checks have been spent.
    """

    def __init__(
        self,
        client: ImageClient,
        *,
        interval_s: float = 2.0,
        max_attempts: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.client = client
        self.interval_s = interval_s
        self.max_attempts = max_attempts
        self.sleep = sleep

    def submit(self, prompt: str, style: StyleParameters | None = None) -> ImageGenerationJob:
        return ImageGenerationJob(request_id=self.client.submit(prompt, style))

    def poll_until_terminal(self, request_id: str) -> ImageGenerationJob:
        for attempt in range(1, self.max_attempts + 1):
            self.sleep(self.interval_s)

            try:
                status = self.client.check_status(request_id)
            except TransportError as e:
                logger.warning("status check %s/%s for %s failed: %s", attempt, self.max_attempts, request_id, e)
                continue
            except UpstreamError as e:
                if e.status_code >= 500:
                    logger.warning("status check %s/%s for %s got %s", attempt, self.max_attempts, request_id, e.status_code)
                    continue
                raise StatusCheckError(request_id, e.status_code) from e

            state = parse_state(status.get("state"))
            if state not in TERMINAL:
                logger.debug("image job %s still pending (%s/%s)", request_id, attempt, self.max_attempts)
                continue

            if state == JobState.FAILED:
                raise GenerationFailedError(status.get("error_message"))

            output = status.get("output") or {}
            image_url = output.get("image_url") if isinstance(output, dict) else None
            if not image_url:
                raise MalformedResultError("Image generation completed but no image URL found")
            logger.info("image job succeeded", extra={"job_id": request_id, "checks": attempt})
            return ImageGenerationJob(request_id=request_id, state=state, result_url=image_url)

        raise GenerationTimeoutError(request_id, self.max_attempts)

    def generate(self, prompt: str, style: StyleParameters | None = None) -> str:
        job = self.submit(prompt, style)
        return self.poll_until_terminal(job.request_id).result_url


def build_image_poller(settings: Settings, *, sleep: Callable[[float], None] = time.sleep) -> ImageJobPoller:
    if not settings.API_TOKEN:
        raise ConfigurationError("ON_DEMAND_API_ACCESS_TOKEN")

    http = HttpClient(token=settings.API_TOKEN, timeout_s=settings.request_timeout_s)
    client = ImageClient(
        http=http,
        submit_url=settings.image_url,
        status_url_base=settings.image_status_url_base,
        style=StyleParameters(
            guidance=settings.image_guidance,
            width=settings.image_width,
            height=settings.image_height,
            num_steps=settings.image_num_steps,
        ),
    )
    return ImageJobPoller(
        client,
        interval_s=settings.IMAGE_POLL_INTERVAL_S,
        max_attempts=settings.image_max_attempts,
        sleep=sleep,
    )
