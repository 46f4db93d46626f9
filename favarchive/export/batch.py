"""Batch planning and page splitting for the public export."""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from favarchive.models import Page, StatusEntry

logger = logging.getLogger(__name__)

MAX_ITEMS_PER_PAGE = 10
MAX_ITEMS_PER_BATCH = 20

# Batch creation times are rounded to 100 microseconds.
ROUND_CREATED_AT_NS = 100_000
NS_PER_SECOND = 1_000_000_000


def new_batch_id(created_at_ns: int) -> str:
    return f"{created_at_ns // ROUND_CREATED_AT_NS}-auto"


class CreatedAtFactory:
    """Hands out rounded creation times that strictly increase within a run.

    When the clock has not moved past the last issued value, the next value is
    advanced by one rounding step instead of being reused.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns):
        self._clock_ns = clock_ns
        self._current = self._truncate(clock_ns())

    @staticmethod
    def _truncate(ns: int) -> int:
        return ns - ns % ROUND_CREATED_AT_NS

    def __call__(self) -> int:
        now = self._truncate(self._clock_ns())
        if now > self._current:
            self._current = now
        else:
            self._current += ROUND_CREATED_AT_NS
        return self._current


@dataclass
class Batch:
    """A group of status ids, newest first, published together."""

    batch_id: str
    tweets: list[int]
    is_head: bool
    created_at_ns: int

    @classmethod
    def merged(cls, created_at_ns: int, tweets: list[int]) -> "Batch":
        return cls(new_batch_id(created_at_ns), tweets, False, created_at_ns)

    @classmethod
    def head(cls, created_at_ns: int, tweets: list[int]) -> "Batch":
        return cls(new_batch_id(created_at_ns), tweets, True, created_at_ns)

    @property
    def created_at(self) -> int:
        """Creation time in Unix seconds."""
        return self.created_at_ns // NS_PER_SECOND

    def __str__(self) -> str:
        kind = "HeadBatch" if self.is_head else "MergedBatch"
        return f"{kind}{{BatchID: {self.batch_id}, Len: {len(self.tweets)}}}"

    def split_pages(self) -> list[Page]:
        """Split the batch into pages.

        Head batches get one page per status, addressable by the status id.
        Merged batches get numbered pages of up to MAX_ITEMS_PER_PAGE statuses.
        """
        ts = self.created_at
        if self.is_head:
            return [
                Page(
                    id=f"head/{self.batch_id}/{tweet}",
                    statuses=[StatusEntry(id=str(tweet), ts=ts)],
                    created_at=ts,
                )
                for tweet in self.tweets
            ]
        newest_first = sorted(self.tweets, reverse=True)
        return [
            Page(
                id=f"merged/{self.batch_id}/{i // MAX_ITEMS_PER_PAGE + 1:06d}",
                statuses=[StatusEntry(id=str(tweet), ts=ts) for tweet in newest_first[i : i + MAX_ITEMS_PER_PAGE]],
                created_at=ts,
            )
            for i in range(0, len(newest_first), MAX_ITEMS_PER_PAGE)
        ]


def plan_batches(
    status_ids: Iterable[int],
    new_created_at: Optional[Callable[[], int]] = None,
) -> list[Batch]:
    """Partition status ids into merged batches followed by one head batch.

    Ids are sorted oldest first and chunked by MAX_ITEMS_PER_BATCH; the last
    chunk becomes the head. Each batch stores its ids newest first.
    """
    old_to_new = sorted(set(status_ids))
    if not old_to_new:
        return []
    chunks = [
        sorted(old_to_new[i : i + MAX_ITEMS_PER_BATCH], reverse=True)
        for i in range(0, len(old_to_new), MAX_ITEMS_PER_BATCH)
    ]
    if new_created_at is None:
        new_created_at = CreatedAtFactory()

    batches = [Batch.merged(new_created_at(), chunk) for chunk in chunks[:-1]]
    batches.append(Batch.head(new_created_at(), chunks[-1]))
    logger.debug(f"Planned {len(batches)} batches for {len(old_to_new)} statuses")
    return batches
