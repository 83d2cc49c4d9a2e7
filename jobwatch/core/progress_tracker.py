"""
Background job progress tracking.

Polls a remote job-status endpoint on a fixed cadence and reconciles the
responses into a small state machine: running, succeeded, or failed
(explicit failure, startup timeout, processing timeout, transport error).

Dependencies: jobwatch.core.scheduler, jobwatch.models, jobwatch.configs
System role: Client-side lifecycle of one asynchronous server job
"""

import asyncio
import logging
from collections import deque
from typing import Callable, Protocol

from jobwatch.configs import TrackerSettings, get_settings
from jobwatch.core.exceptions import (
    JobApiError,
    JobNotFoundError,
    TrackerIdleError,
    ValidationError,
)
from jobwatch.core.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from jobwatch.models.job import FailureKind, JobStatus, StatusSnapshot, TrackerView
from jobwatch.observability.log_utils import log_exception_with_context, log_with_context
from jobwatch.observability.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[TrackerView], None]


class StatusFetcher(Protocol):
    """Anything able to read one job status; JobApiClient is the usual one."""

    async def get_status(self, job_id: str) -> StatusSnapshot:
        """
        Fetch the current status of a job.

        Raises:
            JobNotFoundError: The job is unknown (not started yet or cleaned up)
            JobApiError: Any other failure
        """
        ...


class JobProgressTracker:
    """
    Track one asynchronous job to completion by polling its status.

    State is exposed through ``view`` (an immutable TrackerView) and pushed
    to subscribers after every change. The tracker never raises out of its
    polling loop: every terminal outcome lands in ``error`` or
    ``is_complete``.

    A tracker holds at most one job. Starting a different job discards the
    previous one completely, including any response still in flight for it.

    Usage:
        async with JobApiClient.from_settings() as client:
            tracker = JobProgressTracker(client)
            tracker.start_tracking(job_id)
            view = await tracker.wait_until_finished()
    """

    def __init__(
        self,
        status_fetcher: StatusFetcher,
        scheduler: Scheduler | None = None,
        settings: TrackerSettings | None = None,
    ) -> None:
        """
        Initialize an idle tracker.

        Args:
            status_fetcher: Source of job status snapshots
            scheduler: Timer implementation (asyncio timer by default)
            settings: Poll cadence and timeout bounds (global settings by default)
        """
        self._fetcher = status_fetcher
        self._scheduler = scheduler or AsyncioScheduler()
        self._settings = settings or get_settings().tracker
        self._listeners: list[Listener] = []
        self._pending_views: deque[TrackerView] = deque()
        self._notifying = False
        self._timer: TimerHandle | None = None
        self._epoch = 0
        self._clear()

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def view(self) -> TrackerView:
        """Current read-only state."""
        return TrackerView(
            job_id=self._job_id,
            status_data=self._status_data,
            error=self._error,
            failure_kind=self._failure_kind,
            is_complete=self._is_complete,
        )

    @property
    def job_id(self) -> str | None:
        return self._job_id

    @property
    def status_data(self) -> StatusSnapshot | None:
        return self._status_data

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def failure_kind(self) -> FailureKind | None:
        return self._failure_kind

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def is_running(self) -> bool:
        return self._job_id is not None and not self._is_complete and self._error is None

    @property
    def is_polling(self) -> bool:
        """True while the poll timer is active."""
        return self._timer is not None

    @property
    def poll_attempts(self) -> int:
        return self._poll_attempts

    @property
    def saw_first_success(self) -> bool:
        return self._saw_first_success

    @property
    def has_completed(self) -> bool:
        return self._has_completed

    @property
    def is_poll_in_flight(self) -> bool:
        return self._poll_in_flight

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_tracking(self, job_id: str) -> None:
        """
        Begin tracking a job; the first poll fires immediately.

        Starting the job already held is a no-op, except that a job stopped
        with stop_tracking() before reaching a terminal state resumes polling.

        Args:
            job_id: Identifier returned by the job-start endpoint

        Raises:
            ValidationError: If job_id is empty
            RuntimeError: If the default scheduler is used outside an event loop
        """
        if not isinstance(job_id, str) or not job_id.strip():
            raise ValidationError("job_id must be a non-empty string", field="job_id")

        if job_id == self._job_id:
            if self._has_completed or self._timer is not None:
                logger.debug(f"Already tracking job {job_id}, ignoring start")
                return
            logger.info(f"Resuming tracking of job {job_id}")
            self._start_timer()
            return

        if self._job_id is not None:
            logger.info(f"Switching tracking from job {self._job_id} to {job_id}")
            self.stop_tracking()
        self._clear()
        self._job_id = job_id
        log_with_context(logger, logging.INFO, "Started tracking job", job_id=job_id)
        self._start_timer()
        self._notify()

    def stop_tracking(self) -> None:
        """Cancel the poll timer. Keeps job_id and status_data; idempotent."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def reset(self) -> None:
        """Stop polling and return to the freshly constructed state."""
        self.stop_tracking()
        had_job = self._job_id is not None
        self._clear()
        if had_job:
            logger.info("Tracker reset")
        self._notify()

    async def aclose(self) -> None:
        """Stop polling and wait for outstanding poll tasks to settle."""
        self.stop_tracking()
        await self._scheduler.drain()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new view after each state change.

        Args:
            listener: Callable receiving a TrackerView

        Returns:
            Callable[[], None]: Unsubscribe function
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_until_finished(self, timeout: float | None = None) -> TrackerView:
        """
        Wait until the tracked job completes or fails.

        Args:
            timeout: Seconds to wait, None to wait indefinitely

        Returns:
            TrackerView: Terminal view of the job

        Raises:
            TrackerIdleError: No job is tracked, or tracking was reset or
                switched to another job while waiting
            TimeoutError: The timeout elapsed first
        """
        job_id = self._job_id
        if job_id is None:
            raise TrackerIdleError("No job is being tracked")

        current = self.view
        if current.is_finished:
            return current

        done: asyncio.Future[TrackerView] = asyncio.get_running_loop().create_future()

        def on_change(view: TrackerView) -> None:
            if done.done():
                return
            if view.job_id != job_id or view.is_finished:
                done.set_result(view)

        unsubscribe = self.subscribe(on_change)
        try:
            view = await asyncio.wait_for(done, timeout)
        finally:
            unsubscribe()

        if view.job_id != job_id:
            raise TrackerIdleError(
                f"Tracking of job {job_id} was reset before it finished",
                {"job_id": job_id},
            )
        return view

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll(self) -> None:
        """Run one poll cycle; skipped while another poll is outstanding or after a terminal state."""
        if self._poll_in_flight or self._has_completed or self._job_id is None:
            return

        job_id = self._job_id
        epoch = self._epoch
        self._poll_in_flight = True
        self._poll_attempts += 1
        logger.debug(f"Polling job {job_id} (attempt {self._poll_attempts})")

        try:
            snapshot = await self._fetcher.get_status(job_id)
        except JobNotFoundError:
            if self._is_stale(job_id, epoch):
                return
            self._handle_not_found(job_id)
            return
        except JobApiError as e:
            if self._is_stale(job_id, epoch):
                return
            self._handle_failure(
                e.server_message or self._settings.status_check_failed_message,
                FailureKind.TRANSPORT_FAILURE,
            )
            return
        except Exception as e:
            if self._is_stale(job_id, epoch):
                return
            log_exception_with_context(
                logger,
                "Unexpected error while polling job",
                e,
                job_id=job_id,
                poll_attempts=self._poll_attempts,
            )
            self._handle_failure(
                self._settings.status_check_failed_message,
                FailureKind.TRANSPORT_FAILURE,
            )
            return

        if self._is_stale(job_id, epoch):
            return
        log_with_context(logger, logging.DEBUG, "Status received", job_id=job_id, snapshot=snapshot)
        self._apply_snapshot(snapshot)

    def _is_stale(self, job_id: str, epoch: int) -> bool:
        stale = epoch != self._epoch or job_id != self._job_id or self._has_completed
        if stale:
            logger.debug(f"Discarding late status response for job {job_id}")
        return stale

    def _handle_not_found(self, job_id: str) -> None:
        settings = self._settings
        if self._saw_first_success:
            if settings.missing_after_success_means_done:
                logger.info(f"Job {job_id} status record is gone after being seen; treating as completed")
                self._handle_success()
            else:
                self._handle_failure(
                    f"Job not found: {job_id}",
                    FailureKind.TRANSPORT_FAILURE,
                )
            return

        if self._poll_attempts > settings.startup_timeout_polls:
            self._handle_failure(
                settings.startup_timeout_message,
                FailureKind.STARTUP_TIMEOUT,
            )
            return

        # Job not visible yet, keep polling
        self._poll_in_flight = False

    def _apply_snapshot(self, snapshot: StatusSnapshot) -> None:
        """
        Classify a successful status response.

        Only Processing readings count toward the processing timeout. A
        status outside Processing/Succeeded/Failed (e.g. "Queued") keeps the
        job running with no upper bound until the server reports a known
        state or stop_tracking() is called.
        """
        settings = self._settings
        if not self._saw_first_success:
            self._saw_first_success = True
            # Startup timeout only measures time to first response
            self._poll_attempts = 0

        self._status_data = snapshot

        if snapshot.status is JobStatus.SUCCEEDED or snapshot.percent == 100:
            self._handle_success()
            return

        if snapshot.status is JobStatus.FAILED:
            self._handle_failure(
                snapshot.message or snapshot.error or settings.job_failed_message,
                FailureKind.EXPLICIT_FAILURE,
            )
            return

        if (
            snapshot.status is JobStatus.PROCESSING
            and self._poll_attempts > settings.processing_timeout_polls
        ):
            self._handle_failure(
                settings.processing_timeout_message,
                FailureKind.PROCESSING_TIMEOUT,
            )
            return

        self._poll_in_flight = False
        self._notify()

    def _handle_success(self) -> None:
        self._is_complete = True
        self._has_completed = True
        self._poll_in_flight = False
        self._status_data = StatusSnapshot(
            status=JobStatus.SUCCEEDED,
            percent=100,
            message=self._settings.completion_message,
        )
        self.stop_tracking()
        log_with_context(
            logger, logging.INFO, "Job completed", job_id=self._job_id
        )
        self._notify()

    def _handle_failure(self, message: str, kind: FailureKind) -> None:
        self._error = message
        self._failure_kind = kind
        self._has_completed = True
        self._poll_in_flight = False
        self.stop_tracking()
        log_with_context(
            logger,
            logging.WARNING,
            f"Job failed: {message}",
            job_id=self._job_id,
            failure_kind=kind.value,
            poll_attempts=self._poll_attempts,
        )
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_timer(self) -> None:
        self._timer = self._scheduler.schedule(
            self._settings.poll_interval_seconds, self.poll
        )

    def _clear(self) -> None:
        self._epoch += 1
        self._job_id: str | None = None
        self._status_data: StatusSnapshot | None = None
        self._error: str | None = None
        self._failure_kind: FailureKind | None = None
        self._is_complete = False
        self._poll_in_flight = False
        self._has_completed = False
        self._poll_attempts = 0
        self._saw_first_success = False

    def _notify(self) -> None:
        if not self._listeners:
            return
        self._pending_views.append(self.view)
        # Changes made by a listener are delivered after the current view.
        if self._notifying:
            return
        self._notifying = True
        try:
            while self._pending_views:
                view = self._pending_views.popleft()
                for listener in list(self._listeners):
                    try:
                        listener(view)
                    except Exception:
                        logger.exception("Tracker listener raised")
        finally:
            self._notifying = False
