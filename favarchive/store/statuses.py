"""Flat-file cache of fetch results, one JSON file per status id."""
import logging
from pathlib import Path
from typing import Optional
from pydantic import ValidationError

from favarchive.config import STATUSES_DIR
from favarchive.errors import PersistenceError
from favarchive.models import StatusRecord
from favarchive.store.jsonfile import write_json_async

logger = logging.getLogger(__name__)


class StatusStore:
    """Reads and writes StatusRecord files under statuses_dir."""

    def __init__(self, statuses_dir: Path = STATUSES_DIR):
        self.statuses_dir = statuses_dir

    def path_for(self, status_id: int) -> Path:
        return self.statuses_dir / f"{status_id}.json"

    def get(self, status_id: int) -> Optional[StatusRecord]:
        """Return the cached record, or None if missing or unreadable."""
        return self._read(self.path_for(status_id))

    def is_success(self, status_id: int) -> bool:
        record = self.get(status_id)
        return record is not None and record.is_success()

    async def put(self, record: StatusRecord) -> None:
        """Write a record, replacing any previous one for the same id."""
        await write_json_async(self.path_for(int(record.id)), record.model_dump(mode="json"))

    def list_ids(self) -> list[int]:
        """List every cached status id, whatever the outcome of its last fetch."""
        ids = []
        for path in sorted(self.statuses_dir.glob("*.json")):
            try:
                ids.append(int(path.stem))
            except ValueError as e:
                raise PersistenceError(f"Unexpected file in status cache: {path}") from e
        return ids

    def _read(self, path: Path) -> Optional[StatusRecord]:
        try:
            return StatusRecord.model_validate_json(path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable status file {path}: {e}")
            return None
