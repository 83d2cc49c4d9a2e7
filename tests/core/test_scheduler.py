"""
Test suite for interval schedulers.

Covers the simulated clock used by tracker tests and the asyncio timer
used in production.

System role: Verification of polling cadence primitives
"""

import asyncio

import pytest

from jobwatch.core.scheduler import AsyncioScheduler, ManualScheduler


class Recorder:
    """Async callback counting its invocations."""

    def __init__(self) -> None:
        self.count = 0

    async def __call__(self) -> None:
        self.count += 1


class TestManualScheduler:
    """Test suite for the simulated-clock scheduler."""

    @pytest.mark.asyncio
    async def test_fires_immediately_then_every_interval(self) -> None:
        """Callback fires at t=0 and at each interval boundary."""
        scheduler = ManualScheduler()
        callback = Recorder()
        scheduler.schedule(2.0, callback)

        await scheduler.advance(0)
        assert callback.count == 1

        await scheduler.advance(1.5)
        assert callback.count == 1

        await scheduler.advance(0.5)
        assert callback.count == 2

        await scheduler.advance(10)
        assert callback.count == 7
        assert scheduler.fired == 7
        assert scheduler.now == pytest.approx(12.0)

    @pytest.mark.asyncio
    async def test_cancel_stops_future_firings(self) -> None:
        """Cancelled timers never fire again."""
        scheduler = ManualScheduler()
        callback = Recorder()
        timer = scheduler.schedule(1.0, callback)

        await scheduler.advance(2)
        timer.cancel()
        await scheduler.advance(5)

        assert callback.count == 3
        assert timer.cancelled is True
        assert scheduler.active_timers == []

    @pytest.mark.asyncio
    async def test_timers_fire_in_clock_order(self) -> None:
        """Interleaved timers fire by due time."""
        scheduler = ManualScheduler()
        order: list[str] = []

        async def fast() -> None:
            order.append("fast")

        async def slow() -> None:
            order.append("slow")

        scheduler.schedule(1.0, fast)
        scheduler.schedule(1.5, slow)
        await scheduler.advance(3)

        assert order == ["fast", "slow", "fast", "slow", "fast", "fast", "slow"]

    def test_rejects_non_positive_interval(self) -> None:
        """Zero interval would never let the clock move."""
        with pytest.raises(ValueError):
            ManualScheduler().schedule(0, Recorder())


class TestAsyncioScheduler:
    """Test suite for the event-loop scheduler."""

    @pytest.mark.asyncio
    async def test_fires_repeatedly_until_cancelled(self) -> None:
        """Timer keeps firing on the loop and stops once cancelled."""
        scheduler = AsyncioScheduler()
        callback = Recorder()

        timer = scheduler.schedule(0.01, callback)
        await asyncio.sleep(0.055)
        timer.cancel()
        await scheduler.drain()
        fired = callback.count
        await asyncio.sleep(0.03)

        assert fired >= 2
        assert callback.count == fired
        assert timer.cancelled is True

    @pytest.mark.asyncio
    async def test_slow_callbacks_do_not_delay_cadence(self) -> None:
        """Each firing runs as its own task."""
        scheduler = AsyncioScheduler()
        release = asyncio.Event()
        started = 0

        async def slow() -> None:
            nonlocal started
            started += 1
            await release.wait()

        timer = scheduler.schedule(0.01, slow)
        await asyncio.sleep(0.045)
        timer.cancel()

        assert started >= 2

        release.set()
        await scheduler.drain()

    def test_schedule_requires_running_loop(self) -> None:
        """Scheduling outside an event loop is a programming error."""
        with pytest.raises(RuntimeError):
            AsyncioScheduler().schedule(1.0, Recorder())
