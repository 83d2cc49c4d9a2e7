"""
Job domain models and schemas.

Wire payloads of the remote job API and the read-only view exposed by
JobProgressTracker.

Dependencies: pydantic
System role: Job status API contracts
"""

import enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class JobStatus(str, enum.Enum):
    """
    Remote job execution states.

    PROCESSING: Job accepted and running; percent/message describe progress
    SUCCEEDED: Job finished; its status record may be deleted shortly after
    FAILED: Job finished with an error; message carries the reason
    """

    PROCESSING = "Processing"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @classmethod
    def parse(cls, value: Any) -> "JobStatus | None":
        """Map a raw status string to a member, case-insensitively; None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        return None


class FailureKind(str, enum.Enum):
    """Classification of a terminal tracking error."""

    STARTUP_TIMEOUT = "startup_timeout"
    PROCESSING_TIMEOUT = "processing_timeout"
    EXPLICIT_FAILURE = "explicit_failure"
    TRANSPORT_FAILURE = "transport_failure"


class ApiModel(BaseModel):
    """Base for payloads exchanged in camelCase with the job API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class StatusSnapshot(ApiModel):
    """One job status reading, replaced wholesale on every poll."""

    model_config = ConfigDict(frozen=True)

    status: JobStatus | None = Field(default=None, description="Job state")
    percent: float = Field(default=0.0, description="Progress percentage (0-100)")
    message: str = Field(default="", description="Human-readable progress message")
    error: str | None = Field(default=None, description="Server diagnostic, if any")

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> JobStatus | None:
        # Unknown states are not terminal; the tracker keeps polling.
        return JobStatus.parse(value)

    @field_validator("percent", mode="before")
    @classmethod
    def _clamp_percent(cls, value: Any) -> float:
        if value is None:
            return 0.0
        percent = float(value)
        # NaN would otherwise clamp to 100 and read as completion.
        if not math.isfinite(percent):
            raise ValueError(f"percent must be a finite number, got {value!r}")
        return max(0.0, min(100.0, percent))

    @field_validator("message", mode="before")
    @classmethod
    def _default_message(cls, value: Any) -> str:
        return "" if value is None else str(value)


class JobStartResponse(ApiModel):
    """Response of a job-start endpoint."""

    job_id: str | None = Field(default=None, description="Identifier of the scheduled job")


class TrackerView(BaseModel):
    """Read-only projection of a JobProgressTracker's state."""

    model_config = ConfigDict(frozen=True)

    job_id: str | None = None
    status_data: StatusSnapshot | None = None
    error: str | None = None
    failure_kind: FailureKind | None = None
    is_complete: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_running(self) -> bool:
        """True while a job is held and has neither completed nor failed."""
        return self.job_id is not None and not self.is_complete and self.error is None

    @property
    def is_finished(self) -> bool:
        """True once the tracked job reached a terminal state."""
        return self.is_complete or self.error is not None
