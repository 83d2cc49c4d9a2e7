"""
Import job coordinator.

Starts a server-side import from raw text and hands the returned job to a
JobProgressTracker, notifying registered callbacks once the import lands
and then resetting the tracker for the next import. Failed imports stay on
the tracker until dismissed.

Dependencies: jobwatch.boundary.http, jobwatch.core
System role: Orchestration of "start import, then track it"
"""

from typing import Any, Callable

from jobwatch.boundary.http.job_api_client import JobApiClient
from jobwatch.core.exceptions import JobApiError
from jobwatch.core.progress_tracker import JobProgressTracker
from jobwatch.models.job import TrackerView
from jobwatch.observability.logger import get_logger

logger = get_logger(__name__)

CompletionCallback = Callable[[str], None]


class ImportCoordinator:
    """
    Import orchestrator.

    Owns the start request and delegates progress to its tracker. Failures
    to start are reported through the return value and ``last_start_error``
    rather than raised, so callers can show a message and offer a retry.
    """

    def __init__(
        self,
        client: JobApiClient,
        tracker: JobProgressTracker | None = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            client: Job API client used to start imports
            tracker: Tracker to drive (one is created on the client if omitted)
        """
        self._client = client
        self.tracker = tracker or JobProgressTracker(client)
        self._is_importing = False
        self._last_start_error: str | None = None
        self._completion_callbacks: list[CompletionCallback] = []
        self._notified_job_id: str | None = None
        self.tracker.subscribe(self._on_tracker_change)

    @property
    def is_importing(self) -> bool:
        """True while the import start request is in progress."""
        return self._is_importing

    @property
    def last_start_error(self) -> str | None:
        return self._last_start_error

    @property
    def view(self) -> TrackerView:
        return self.tracker.view

    def on_completed(self, callback: CompletionCallback) -> None:
        """Register a callback receiving the job ID of each successful import."""
        self._completion_callbacks.append(callback)

    async def start_import(self, raw_text: str, **fields: Any) -> bool:
        """
        Start an import and begin tracking it.

        Args:
            raw_text: Source text to import
            **fields: Extra form fields for the import endpoint

        Returns:
            bool: True if the job was started and tracking began
        """
        self._is_importing = True
        self._last_start_error = None
        try:
            job_id = await self._client.start_import(raw_text, **fields)
        except JobApiError as e:
            self._last_start_error = e.server_message or e.message
            logger.error(f"Import failed: {self._last_start_error}")
            return False
        finally:
            self._is_importing = False

        self.tracker.start_tracking(job_id)
        return True

    def dismiss(self) -> bool:
        """
        Clear a failed job from the tracker; a running job keeps going.

        Returns:
            bool: True if the tracker was reset
        """
        if not self.tracker.view.is_finished:
            return False
        self.tracker.reset()
        self._notified_job_id = None
        return True

    def _on_tracker_change(self, view: TrackerView) -> None:
        if not view.is_complete or view.job_id is None:
            return
        if view.job_id == self._notified_job_id:
            return
        self._notified_job_id = view.job_id
        logger.info(f"Import job {view.job_id} completed")
        for callback in list(self._completion_callbacks):
            try:
                callback(view.job_id)
            except Exception:
                logger.exception("Import completion callback raised")
        self._notified_job_id = None
        # A callback may already have started the next import.
        if self.tracker.job_id == view.job_id and self.tracker.is_complete:
            self.tracker.reset()
