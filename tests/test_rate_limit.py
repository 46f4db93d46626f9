"""Tests for the adaptive rate limiter."""
import asyncio
import pytest
from favarchive.fetch.rate_limit import AdaptiveRateLimiter


class FakeClock:
    """Clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_limiter(rate: float = 10.0, max_level: int = 5):
    clock = FakeClock()
    return AdaptiveRateLimiter(rate, max_level, clock=clock, sleep=clock.sleep), clock


def test_level_starts_at_zero():
    limiter, _ = make_limiter()
    assert limiter.level == 0
    assert limiter.effective_rate() == 10.0


def test_overload_halves_rate():
    """One overload report raises the level to 1 and halves the rate."""
    limiter, _ = make_limiter()
    limiter.report_overload()
    assert limiter.level == 1
    assert limiter.effective_rate() == 5.0


def test_overload_clamped_at_max_level():
    limiter, _ = make_limiter(max_level=5)
    for _ in range(8):
        limiter.report_overload()
    assert limiter.level == 5
    assert limiter.effective_rate() == pytest.approx(10.0 / 32)


def test_success_decrements_by_one():
    limiter, _ = make_limiter(max_level=5)
    for _ in range(5):
        limiter.report_overload()
    limiter.report_success()
    assert limiter.level == 4


def test_success_floor_at_zero():
    limiter, _ = make_limiter()
    limiter.report_success()
    limiter.report_success()
    assert limiter.level == 0


def test_first_permit_is_immediate():
    limiter, clock = make_limiter()
    asyncio.run(limiter.acquire())
    assert clock.sleeps == []


def test_permits_spaced_by_interval():
    """Back-to-back permits are spaced 1/rate apart."""
    limiter, clock = make_limiter(rate=10.0)

    async def run():
        for _ in range(3):
            await limiter.acquire()

    asyncio.run(run())
    assert clock.sleeps == [pytest.approx(0.1), pytest.approx(0.1)]


def test_wait_uses_rate_for_current_level():
    """The rate is reconfigured from the level before each wait."""
    limiter, clock = make_limiter(rate=10.0)

    async def run():
        await limiter.acquire()
        limiter.report_overload()
        limiter.report_overload()
        await limiter.acquire()

    asyncio.run(run())
    assert limiter.rate == 2.5
    assert clock.sleeps == [pytest.approx(0.4)]


def test_idle_limiter_does_not_wait():
    limiter, clock = make_limiter(rate=10.0)

    async def run():
        await limiter.acquire()
        clock.now += 5
        await limiter.acquire()

    asyncio.run(run())
    assert clock.sleeps == []


def test_unlimited_rate_never_waits():
    limiter, clock = make_limiter(rate=0)

    async def run():
        for _ in range(5):
            await limiter.acquire()

    asyncio.run(run())
    assert clock.sleeps == []


def test_acquire_is_cancellable():
    """Cancelling the waiting task aborts the permit wait."""
    limiter = AdaptiveRateLimiter(0.001, 5)

    async def run():
        await limiter.acquire()
        task = asyncio.create_task(limiter.acquire())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(asyncio.wait_for(run(), timeout=5))
