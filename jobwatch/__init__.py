"""
jobwatch: client-side tracking of asynchronous server jobs.

Polls a job-status endpoint until the job succeeds, fails, or times out.
"""

from jobwatch.boundary.http import JobApiClient
from jobwatch.core import JobProgressTracker
from jobwatch.models import FailureKind, JobStatus, StatusSnapshot, TrackerView

__all__ = [
    "FailureKind",
    "JobApiClient",
    "JobProgressTracker",
    "JobStatus",
    "StatusSnapshot",
    "TrackerView",
]
