"""Domain models for job tracking."""

from jobwatch.models.job import (
    FailureKind,
    JobStartResponse,
    JobStatus,
    StatusSnapshot,
    TrackerView,
)

__all__ = [
    "FailureKind",
    "JobStartResponse",
    "JobStatus",
    "StatusSnapshot",
    "TrackerView",
]
