"""Job runner: download statuses, then rebuild the public export."""
import asyncio
import logging
import signal
import uuid
from pathlib import Path
from typing import Optional

from favarchive.config import config, PUBLIC_DIR, STATUSES_DIR
from favarchive.export.publisher import export_public_from_statuses
from favarchive.fetch.client import FxTwitterClient
from favarchive.fetch.manager import FetchManager, FetchOutcome
from favarchive.fetch.rate_limit import AdaptiveRateLimiter
from favarchive.models import CurrentPointer
from favarchive.sources import read_status_ids
from favarchive.store.statuses import StatusStore

logger = logging.getLogger(__name__)


class ArchiveRunner:
    """Orchestrates the fetch and export phases."""

    def __init__(
        self,
        paths: list[Path],
        statuses_dir: Path = STATUSES_DIR,
        public_dir: Path = PUBLIC_DIR,
        concurrency: Optional[int] = None,
        rate_per_second: Optional[float] = None,
        max_retries: Optional[int] = None,
        export: bool = True,
    ):
        self.paths = paths
        self.public_dir = public_dir
        self.concurrency = concurrency if concurrency is not None else config.CONCURRENCY
        self.rate_per_second = rate_per_second if rate_per_second is not None else config.RATE_PER_SECOND
        self.max_retries = max_retries if max_retries is not None else config.MAX_RETRIES
        self.export = export
        self.store = StatusStore(statuses_dir)

        self.run_id = str(uuid.uuid4())
        logger.info(f"Run ID: {self.run_id}")

        self.outcome: Optional[FetchOutcome] = None
        self.current: Optional[CurrentPointer] = None

    async def run(self) -> None:
        """Run both phases; SIGTERM cancels the run like Ctrl-C."""
        self._install_signal_handlers()
        if self.paths:
            status_ids = read_status_ids(self.paths)
            self.outcome = await self.fetch(status_ids)
        if self.export:
            self.current = export_public_from_statuses(self.store, self.public_dir)
        self._final_report()

    async def fetch(self, status_ids: list[int]) -> FetchOutcome:
        limiter = AdaptiveRateLimiter(self.rate_per_second, self.max_retries)
        async with FxTwitterClient() as client:
            manager = FetchManager(
                self.store,
                client,
                limiter=limiter,
                max_retries=self.max_retries,
                concurrency=self.concurrency,
            )
            return await manager.download_all(status_ids)

    def _install_signal_handlers(self) -> None:
        task = asyncio.current_task()
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGTERM, task.cancel)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on Windows and outside the main thread
            logger.debug("SIGTERM handler not installed")

    def _final_report(self) -> None:
        logger.info("=" * 60)
        logger.info("FINAL REPORT")
        logger.info(f"Run ID: {self.run_id}")
        if self.outcome is not None:
            counts = self.outcome.counts()
            logger.info(f"Downloaded: {counts['success']}")
            logger.info(f"Not found: {counts['not_found']}")
            logger.info(f"Errors: {counts['error']}")
        if self.current is not None:
            logger.info(f"Head batch: {self.current.head}")
            logger.info(f"Last batch: {self.current.last}")
        logger.info("=" * 60)
