"""
Core job tracking logic.

Progress tracker state machine, scheduling primitives and exceptions.
"""

from jobwatch.core.exceptions import (
    JobApiError,
    JobNotFoundError,
    JobStartError,
    JobStatusRequestError,
    JobWatchException,
    TrackerIdleError,
    ValidationError,
)
from jobwatch.core.progress_tracker import JobProgressTracker, StatusFetcher
from jobwatch.core.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
)

__all__ = [
    "AsyncioScheduler",
    "JobApiError",
    "JobNotFoundError",
    "JobProgressTracker",
    "JobStartError",
    "JobStatusRequestError",
    "JobWatchException",
    "ManualScheduler",
    "Scheduler",
    "StatusFetcher",
    "TimerHandle",
    "TrackerIdleError",
    "ValidationError",
]
