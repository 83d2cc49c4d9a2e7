"""
Interval scheduling primitives.

Decouples the tracker's polling cadence from the event loop clock so the
same tracker runs on a real asyncio timer in production and on a
simulated clock in tests.

Dependencies: asyncio (stdlib)
System role: Timer abstraction for periodic polling
"""

import asyncio
from typing import Awaitable, Callable, Protocol

from jobwatch.observability.logger import get_logger

logger = get_logger(__name__)

TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    """Cancel token returned by Scheduler.schedule."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Fires an async callback immediately and then at a fixed interval."""

    def schedule(self, interval: float, callback: TimerCallback) -> TimerHandle:
        """
        Start firing callback every interval seconds, the first time at once.

        Each firing runs the callback as its own task, so a slow callback
        never delays the cadence. Cancelling the handle stops future
        firings; callbacks already running are not interrupted.
        """
        ...

    async def drain(self) -> None:
        """Wait for every callback task spawned so far to finish."""
        ...


class _TaskSet:
    """Keeps strong references to spawned callback tasks until they finish."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def spawn(self, callback: TimerCallback) -> asyncio.Task:
        task = asyncio.ensure_future(callback())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Scheduled callback raised",
                exc_info=task.exception(),
            )

    @property
    def pending(self) -> set[asyncio.Task]:
        return {task for task in self._tasks if not task.done()}

    async def drain(self) -> None:
        while self.pending:
            await asyncio.gather(*self.pending, return_exceptions=True)


class AsyncioTimer:
    """Handle for a timer driven by AsyncioScheduler."""

    def __init__(self) -> None:
        self._cancelled = False
        self._driver: asyncio.Task | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._driver is not None and not self._driver.done():
            self._driver.cancel()


class AsyncioScheduler:
    """Scheduler running on the current asyncio event loop."""

    def __init__(self) -> None:
        self._tasks = _TaskSet()

    def schedule(self, interval: float, callback: TimerCallback) -> AsyncioTimer:
        """
        Start a timer task on the running loop.

        Raises:
            ValueError: If interval is not positive
            RuntimeError: If called outside a running event loop
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        loop = asyncio.get_running_loop()
        timer = AsyncioTimer()
        timer._driver = loop.create_task(self._run(interval, callback, timer))
        return timer

    async def _run(
        self, interval: float, callback: TimerCallback, timer: AsyncioTimer
    ) -> None:
        while not timer.cancelled:
            self._tasks.spawn(callback)
            await asyncio.sleep(interval)

    async def drain(self) -> None:
        await self._tasks.drain()


class ManualTimer:
    """Handle for a timer driven by ManualScheduler."""

    def __init__(self, interval: float, callback: TimerCallback, next_fire: float) -> None:
        self.interval = interval
        self.callback = callback
        self.next_fire = next_fire
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """
    Simulated-clock scheduler.

    Time only moves when advance() is awaited. Every due firing spawns its
    callback as a task and then waits up to settle_timeout real seconds for
    outstanding callbacks, so callbacks that complete without external
    input have finished by the time advance() returns.

    Usage:
        scheduler = ManualScheduler()
        tracker = JobProgressTracker(fetcher, scheduler=scheduler)
        tracker.start_tracking("job-1")
        await scheduler.advance(0)     # first poll
        await scheduler.advance(45)    # 45 more polls at 1s cadence
    """

    def __init__(self, settle_timeout: float = 0.05) -> None:
        self.now = 0.0
        self.fired = 0
        self._settle_timeout = settle_timeout
        self._timers: list[ManualTimer] = []
        self._tasks = _TaskSet()

    def schedule(self, interval: float, callback: TimerCallback) -> ManualTimer:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        timer = ManualTimer(interval, callback, next_fire=self.now)
        self._timers.append(timer)
        return timer

    @property
    def active_timers(self) -> list[ManualTimer]:
        return [timer for timer in self._timers if not timer.cancelled]

    async def advance(self, seconds: float = 0.0) -> None:
        """Move the clock forward, firing every callback that becomes due."""
        target = self.now + seconds
        while True:
            due = [timer for timer in self.active_timers if timer.next_fire <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_fire)
            self.now = timer.next_fire
            timer.next_fire += timer.interval
            self.fired += 1
            self._tasks.spawn(timer.callback)
            await self._settle()
        self.now = target

    async def _settle(self) -> None:
        # Let freshly spawned tasks start before checking what is pending.
        await asyncio.sleep(0)
        pending = self._tasks.pending
        if pending:
            await asyncio.wait(pending, timeout=self._settle_timeout)

    async def drain(self) -> None:
        await self._tasks.drain()
