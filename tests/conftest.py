"""
Shared test fixtures and configuration for entire test suite.

Provides: tracker settings, simulated-clock scheduler, scripted status
fetcher, fake FastAPI job backend
Dependencies: pytest, pytest-asyncio, fastapi, httpx
System role: Test infrastructure and fixture management
"""

import pytest

from jobwatch.configs import TrackerSettings
from jobwatch.core.progress_tracker import JobProgressTracker
from jobwatch.core.scheduler import ManualScheduler
from tests.fakes.job_api import FakeJobApi
from tests.fakes.status_fetcher import FakeStatusFetcher, processing


@pytest.fixture
def tracker_settings() -> TrackerSettings:
    """Provide reference tracker settings independent of the environment."""
    return TrackerSettings(
        poll_interval_seconds=1.0,
        startup_timeout_polls=45,
        processing_timeout_polls=300,
        missing_after_success_means_done=True,
    )


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Provide simulated-clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def fetcher() -> FakeStatusFetcher:
    """Provide status fetcher that reports Processing until scripted otherwise."""
    return FakeStatusFetcher(default=processing())


@pytest.fixture
def tracker(
    fetcher: FakeStatusFetcher,
    scheduler: ManualScheduler,
    tracker_settings: TrackerSettings,
) -> JobProgressTracker:
    """Provide tracker wired to the fake fetcher and simulated clock."""
    return JobProgressTracker(fetcher, scheduler=scheduler, settings=tracker_settings)


@pytest.fixture
def fake_job_api() -> FakeJobApi:
    """Provide in-memory FastAPI job backend."""
    return FakeJobApi()
