"""Adaptive rate limiter shared by all fetch tasks."""
import asyncio
import logging
import threading
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class AdaptiveRateLimiter:
    """Issues one permit at a time at base_rate / 2**level.

    The level rises on each overload report and falls on each success report,
    clamped to [0, max_level]. Level updates take a plain lock that is never
    held across an await; the reconfigure-and-wait sequence takes its own
    asyncio lock so one caller's wait is not invalidated by another's
    reconfiguration.
    """

    def __init__(
        self,
        rate_per_second: float,
        max_level: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_level < 0:
            raise ValueError(f"max_level must be >= 0, got {max_level}")
        self.base_rate = rate_per_second
        self.max_level = max_level
        self._clock = clock
        self._sleep = sleep
        self._level = 0
        # level updates never await and may come from any thread
        self._level_lock = threading.Lock()
        self._wait_lock = asyncio.Lock()
        self._rate = rate_per_second
        self._last_permit: Optional[float] = None

    @property
    def level(self) -> int:
        with self._level_lock:
            return self._level

    @property
    def rate(self) -> float:
        """Rate applied to the most recent permit wait."""
        return self._rate

    def effective_rate(self) -> float:
        return self.base_rate / (1 << self.level)

    def report_success(self) -> None:
        with self._level_lock:
            if self._level > 0:
                self._level -= 1

    def report_overload(self) -> None:
        with self._level_lock:
            if self._level < self.max_level:
                self._level += 1

    async def acquire(self) -> None:
        """Wait until a permit is available. Cancel the awaiting task to abort."""
        async with self._wait_lock:
            rate = self.effective_rate()
            if rate != self._rate:
                logger.debug(f"Rate limit changed: {self._rate:.3f}/s -> {rate:.3f}/s")
                self._rate = rate
            min_interval = 1.0 / rate if rate > 0 else 0

            now = self._clock()
            if self._last_permit is None:
                self._last_permit = now
                return
            ready_at = self._last_permit + min_interval
            if ready_at > now:
                await self._sleep(ready_at - now)
            self._last_permit = max(now, ready_at)
