"""Writes the public batch/page tree from the set of archived status ids."""
import logging
import random
import shutil
import time
from functools import reduce
from pathlib import Path
from typing import Iterable, Optional

from favarchive.config import PUBLIC_DIR
from favarchive.errors import PersistenceError
from favarchive.export.batch import Batch, plan_batches
from favarchive.models import BatchLinked, CurrentPointer, Page
from favarchive.store.jsonfile import write_json
from favarchive.store.statuses import StatusStore

logger = logging.getLogger(__name__)

URL_SAFE_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"
NONCE_LENGTH = 32


def generate_nonce(rng: random.Random, length: int = NONCE_LENGTH) -> str:
    """Random URL-safe token; changes on every export even if content does not."""
    if length < 0:
        raise ValueError(f"invalid length: {length}")
    return "".join(rng.choice(URL_SAFE_CHARSET) for _ in range(length))


def link_batches(
    batches: Iterable[Batch],
    now: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> tuple[list[tuple[BatchLinked, list[Page]]], CurrentPointer]:
    """Link batches in order, each pointing at the batch before it.

    Returns the manifest and pages of every batch plus the current pointer,
    whose head is the head batch and last the merged batch processed just
    before it.
    """
    if now is None:
        now = int(time.time())
    if rng is None:
        rng = random.SystemRandom()

    def link(acc, batch: Batch):
        linked, prev_id, head, last = acc
        pages = batch.split_pages()
        manifest = BatchLinked(
            id=batch.batch_id,
            head=batch.is_head,
            pages=[page.id for page in pages],
            next=prev_id,
            created_at=now,
            updated_at=now,
            update_nonce=generate_nonce(rng),
        )
        if batch.is_head:
            head = batch.batch_id
        else:
            last = batch.batch_id
        return linked + ((manifest, pages),), batch.batch_id, head, last

    linked, _, head, last = reduce(link, batches, ((), None, None, None))
    return list(linked), CurrentPointer(head=head, last=last, updated_at=now)


def export_public(
    status_ids: Iterable[int],
    public_dir: Path = PUBLIC_DIR,
    rng: Optional[random.Random] = None,
) -> CurrentPointer:
    """Rebuild public_dir from scratch for the given status ids."""
    try:
        if public_dir.exists():
            shutil.rmtree(public_dir)
    except OSError as e:
        raise PersistenceError(f"Failed to clear {public_dir}: {e}") from e

    linked, current = link_batches(plan_batches(status_ids), rng=rng)
    for manifest, pages in linked:
        logger.info(str(manifest))
        for page in pages:
            write_json(public_dir / "pages" / f"{page.id}.json", page.model_dump(mode="json"))
        write_json(public_dir / "batches" / f"{manifest.id}.json", manifest.model_dump(mode="json"))

    current.updated_at = int(time.time())
    write_json(public_dir / "current.json", current.model_dump(mode="json"))
    logger.info(f"Exported {len(linked)} batches to {public_dir} (head={current.head}, last={current.last})")
    return current


def export_public_from_statuses(store: StatusStore, public_dir: Path = PUBLIC_DIR) -> CurrentPointer:
    """Export every status with a definitive cached answer."""
    status_ids = store.list_ids()
    logger.info(f"Exporting {len(status_ids)} cached statuses")
    return export_public(status_ids, public_dir)
