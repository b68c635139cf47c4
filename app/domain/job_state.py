from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class JobState(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


TERMINAL = {JobState.SUCCESS, JobState.FAILED}


def parse_state(raw: object) -> JobState:
    """Anything that is not a terminal marker counts as pending."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value == JobState.SUCCESS.value:
            return JobState.SUCCESS
        if value == JobState.FAILED.value:
            return JobState.FAILED
    return JobState.PENDING


@dataclass(frozen=True)
class ImageGenerationJob:
    request_id: str
    state: JobState = JobState.PENDING
    result_url: str | None = None

    def __post_init__(self) -> None:
        if self.state == JobState.SUCCESS and not self.result_url:
            raise ValueError("a successful job requires a result_url")
        if self.state != JobState.SUCCESS and self.result_url is not None:
            raise ValueError("result_url is only present on success")
