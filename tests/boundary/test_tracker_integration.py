"""
End-to-end tracking against the in-memory FastAPI job backend.

System role: Verification of tracker + HTTP client working together
"""

import httpx
import pytest

from jobwatch.boundary.http import JobApiClient
from jobwatch.configs import TrackerSettings
from jobwatch.core.progress_tracker import JobProgressTracker
from jobwatch.core.scheduler import ManualScheduler
from jobwatch.models.job import FailureKind, JobStatus
from tests.fakes.job_api import FakeJobApi


@pytest.fixture
def slow_settle_scheduler() -> ManualScheduler:
    """Simulated clock that waits long enough for ASGI round trips."""
    return ManualScheduler(settle_timeout=1.0)


class TestTrackerOverHttp:
    """Tracker driven by real HTTP responses from the fake backend."""

    @pytest.mark.asyncio
    async def test_job_appears_progresses_and_is_cleaned_up(
        self,
        fake_job_api: FakeJobApi,
        slow_settle_scheduler: ManualScheduler,
        tracker_settings: TrackerSettings,
    ) -> None:
        """Startup 404s, progress, then disappearance resolves as success."""
        fake_job_api.add_job(
            "job-1",
            404,
            404,
            {"status": "Processing", "percent": 20, "message": "Parsing"},
            {"status": "Processing", "percent": 80, "message": "Saving"},
        )
        client = JobApiClient(
            "http://jobs.test", transport=httpx.ASGITransport(app=fake_job_api.app)
        )
        tracker = JobProgressTracker(
            client, scheduler=slow_settle_scheduler, settings=tracker_settings
        )
        percents: list[float] = []
        tracker.subscribe(
            lambda view: view.status_data and percents.append(view.status_data.percent)
        )

        async with client:
            tracker.start_tracking("job-1")
            await slow_settle_scheduler.advance(0)
            await slow_settle_scheduler.advance(1)
            assert tracker.saw_first_success is False
            assert tracker.poll_attempts == 2

            await slow_settle_scheduler.advance(1)
            assert tracker.status_data.message == "Parsing"

            await slow_settle_scheduler.advance(2)
            await tracker.aclose()

        assert tracker.is_complete is True
        assert tracker.error is None
        assert tracker.status_data.status is JobStatus.SUCCEEDED
        assert percents == [20, 80, 100]

    @pytest.mark.asyncio
    async def test_backend_error_fails_tracking(
        self,
        fake_job_api: FakeJobApi,
        slow_settle_scheduler: ManualScheduler,
        tracker_settings: TrackerSettings,
    ) -> None:
        """A 5xx from the backend ends tracking with its message."""
        fake_job_api.add_job(
            "job-1",
            {"status": "Processing", "percent": 20, "message": "Parsing"},
            502,
        )
        client = JobApiClient(
            "http://jobs.test", transport=httpx.ASGITransport(app=fake_job_api.app)
        )
        tracker = JobProgressTracker(
            client, scheduler=slow_settle_scheduler, settings=tracker_settings
        )

        async with client:
            tracker.start_tracking("job-1")
            await slow_settle_scheduler.advance(3)
            await tracker.aclose()

        assert tracker.error == "Backend error 502"
        assert tracker.failure_kind is FailureKind.TRANSPORT_FAILURE
        assert tracker.status_data.message == "Parsing"

    @pytest.mark.asyncio
    async def test_nan_percent_is_transport_failure_not_success(
        self,
        slow_settle_scheduler: ManualScheduler,
        tracker_settings: TrackerSettings,
    ) -> None:
        """A Processing payload with percent NaN never completes the job."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=b'{"status": "Processing", "percent": NaN, "message": "?"}',
                headers={"content-type": "application/json"},
            )

        client = JobApiClient("http://jobs.test", transport=httpx.MockTransport(handler))
        tracker = JobProgressTracker(
            client, scheduler=slow_settle_scheduler, settings=tracker_settings
        )

        async with client:
            tracker.start_tracking("job-1")
            await slow_settle_scheduler.advance(0)
            await tracker.aclose()

        assert tracker.is_complete is False
        assert tracker.error == "Failed to check import status."
        assert tracker.failure_kind is FailureKind.TRANSPORT_FAILURE
