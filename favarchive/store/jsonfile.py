"""Indented JSON file writers shared by the status cache and the exporter."""
from pathlib import Path
from typing import Any
import aiofiles
import orjson

from favarchive.errors import PersistenceError


def dumps(data: Any) -> bytes:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


def write_json(path: Path, data: Any) -> None:
    """Write data to path, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(dumps(data))
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e


async def write_json_async(path: Path, data: Any) -> None:
    """Async variant of write_json used from fetch tasks."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(dumps(data))
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e
