"""Concurrent, rate-limited download of status metadata into the cache."""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from favarchive.config import config
from favarchive.errors import (
    FetchError,
    PersistenceError,
    RetryLimitExceeded,
    StatusNotFound,
    TooManyRequests,
)
from favarchive.fetch.client import FxTwitterClient
from favarchive.fetch.rate_limit import AdaptiveRateLimiter
from favarchive.jobs.progress import FetchProgress
from favarchive.models import StatusRecord
from favarchive.store.statuses import StatusStore

logger = logging.getLogger(__name__)


@dataclass
class FetchOutcome:
    """Status ids bucketed by terminal outcome."""

    successes: list[int] = field(default_factory=list)
    not_found: list[int] = field(default_factory=list)
    errors: list[int] = field(default_factory=list)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False, compare=False)

    async def add(self, bucket: str, status_id: int) -> None:
        async with self._lock:
            getattr(self, bucket).append(status_id)

    def counts(self) -> dict[str, int]:
        return {
            "success": len(self.successes),
            "error": len(self.errors),
            "not_found": len(self.not_found),
        }


class FetchManager:
    """Downloads every status that is not already cached as successful."""

    def __init__(
        self,
        store: StatusStore,
        client: FxTwitterClient,
        limiter: Optional[AdaptiveRateLimiter] = None,
        max_retries: int = config.MAX_RETRIES,
        concurrency: int = config.CONCURRENCY,
        progress_every: int = config.PROGRESS_EVERY,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.client = client
        self.max_retries = max_retries
        self.limiter = limiter or AdaptiveRateLimiter(config.RATE_PER_SECOND, max_retries)
        self.concurrency = concurrency
        self.progress_every = progress_every
        self._clock = clock

    def pending(self, status_ids: Iterable[int]) -> list[int]:
        """Unique ids, in input order, that still need a download."""
        seen = set()
        pending = []
        for status_id in status_ids:
            if status_id in seen:
                continue
            seen.add(status_id)
            if not self.store.is_success(status_id):
                pending.append(status_id)
        return pending

    async def download(self, status_id: int) -> StatusRecord:
        """Download one status, retrying while the source reports overload."""
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                retry=retry_if_exception_type(TooManyRequests),
                before_sleep=before_sleep_log(logger, logging.DEBUG),
            ):
                with attempt:
                    record = await self._attempt(status_id)
        except RetryError as e:
            raise RetryLimitExceeded(
                f"retry limit exceeded for {status_id} after {self.max_retries} attempts"
            ) from e.last_attempt.exception()
        return record

    async def _attempt(self, status_id: int) -> StatusRecord:
        await self.limiter.acquire()
        try:
            record = await self._download_once(status_id)
        except TooManyRequests:
            self.limiter.report_overload()
            raise
        except FetchError:
            self.limiter.report_success()
            raise
        self.limiter.report_success()
        return record

    async def _download_once(self, status_id: int) -> StatusRecord:
        saved_at = int(self._clock())
        try:
            response = await self.client.fetch_status(status_id)
        except StatusNotFound:
            return StatusRecord(id=str(status_id), complete=True, saved_at=saved_at)
        return StatusRecord(
            id=str(status_id),
            complete=True,
            fxtwitter_data=response if response.is_success() else None,
            saved_at=saved_at,
        )

    async def download_all(self, status_ids: Iterable[int]) -> FetchOutcome:
        """Download all pending ids concurrently and persist every outcome."""
        pending = self.pending(status_ids)
        outcome = FetchOutcome()
        progress = FetchProgress(len(pending), self.progress_every)
        semaphore = asyncio.Semaphore(self.concurrency)
        logger.info(f"Downloading {len(pending)} statuses")

        async def process(status_id: int) -> None:
            async with semaphore:
                bucket = await self._process_single(status_id)
            await outcome.add(bucket, status_id)
            if progress.record(bucket):
                progress.log(self.limiter.rate)

        tasks = [asyncio.create_task(process(status_id)) for status_id in pending]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        counts = outcome.counts()
        logger.info(
            f"Downloaded successes={counts['success']} "
            f"errors={counts['error']} not_found={counts['not_found']}"
        )
        return outcome

    async def _process_single(self, status_id: int) -> str:
        """Download and persist one status; returns its outcome bucket."""
        bucket = "successes"
        try:
            record = await self.download(status_id)
            if not record.is_success():
                bucket = "not_found"
        except (FetchError, RetryLimitExceeded) as e:
            logger.error(f"Download error for {status_id}: {e}")
            record = StatusRecord(
                id=str(status_id),
                complete=False,
                saved_at=int(self._clock()),
                error=str(e),
            )
            bucket = "errors"
            previous = self.store.get(status_id)
            if previous is not None and previous.complete:
                # keep an earlier definitive answer
                return bucket

        try:
            await self.store.put(record)
        except PersistenceError as e:
            logger.error(f"Failed to save status {status_id}: {e}")
            bucket = "errors"

        return bucket
