from __future__ import annotations


class ImageGenerationError(RuntimeError):
    pass


class SubmissionError(ImageGenerationError):
    """The job could not be submitted or no request id came back."""


class MalformedResultError(ImageGenerationError):
    """Upstream reported success without a result URL."""


class GenerationFailedError(ImageGenerationError):
    def __init__(self, error_message: str | None = None) -> None:
        self.error_message = error_message or "Unknown error"
        super().__init__(f"Image generation failed: {self.error_message}")


class GenerationTimeoutError(ImageGenerationError, TimeoutError):
    def __init__(self, request_id: str, attempts: int) -> None:
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(f"Image generation timed out after {attempts} status checks")


class StatusCheckError(ImageGenerationError):
    """The status endpoint rejected the check (non-retryable 4xx)."""

    def __init__(self, request_id: str, status_code: int) -> None:
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(f"Image status check for {request_id} failed with status {status_code}")
