"""Progress logging for the fetch phase."""
import logging
import time
from collections import Counter
from typing import Callable

logger = logging.getLogger(__name__)


class FetchProgress:
    """Counts finished downloads per outcome bucket and logs every `every` of them."""

    def __init__(self, total: int, every: int, clock: Callable[[], float] = time.monotonic):
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.total = total
        self.every = every
        self._clock = clock
        self.started = clock()
        self.processed = 0
        self.buckets: Counter[str] = Counter()

    def record(self, bucket: str) -> bool:
        """Count one finished status; True when a progress line is due."""
        self.processed += 1
        self.buckets[bucket] += 1
        return self.processed % self.every == 0 or self.processed == self.total

    def log(self, rate_limit: float) -> None:
        elapsed = self._clock() - self.started
        rate = self.processed / elapsed if elapsed > 0 else 0.0
        eta = (self.total - self.processed) / rate if rate > 0 else 0.0
        logger.info(
            f"Progress: {self.processed}/{self.total} | "
            f"{rate:.2f}/s (limit {rate_limit:.2f}/s) | ETA {eta:.0f}s | "
            f"ok={self.buckets['successes']} not_found={self.buckets['not_found']} "
            f"errors={self.buckets['errors']}"
        )
