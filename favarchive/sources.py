"""Readers for input files listing status ids."""
import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

from favarchive.errors import SourceFormatError

logger = logging.getLogger(__name__)

FAVOLOG_DATE_FORMAT = "%y%m%d %H%M%S"
TRAILING_DIGITS = re.compile(r"(\d+)$")


@dataclass
class FavologItem:
    """One row of a favolog CSV export."""

    tweet_id: int
    timestamp: datetime
    screen_name: str
    text: str
    tags: list[str] = field(default_factory=list)


def parse_favolog_row(row: list[str]) -> FavologItem:
    if len(row) != 5:
        raise SourceFormatError(f"invalid record length: {len(row)}")
    try:
        tweet_id = int(row[0])
        timestamp = datetime.strptime(row[1], FAVOLOG_DATE_FORMAT)
    except ValueError as e:
        raise SourceFormatError(f"invalid record {row[:2]}: {e}") from e
    return FavologItem(
        tweet_id=tweet_id,
        timestamp=timestamp,
        screen_name=row[2],
        text=row[3],
        tags=row[4].split(" "),
    )


def read_favolog_csv(path: Path) -> list[FavologItem]:
    with open(path, newline="", encoding="utf-8") as f:
        return [parse_favolog_row(row) for row in csv.reader(f)]


def read_status_txt(path: Path) -> list[int]:
    """Read one status URL or id per line; the trailing digits are the id."""
    ids = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            match = TRAILING_DIGITS.search(line)
            if not match:
                raise SourceFormatError(f"invalid status: {line}")
            ids.append(int(match.group(1)))
    return ids


def read_status_ids(paths: Iterable[Path]) -> list[int]:
    """Read ids from favolog CSVs first, then from text files. Duplicates are kept."""
    paths = [Path(p) for p in paths]
    favolog_paths = [p for p in paths if p.suffix == ".csv"]
    text_paths = [p for p in paths if p.suffix != ".csv"]

    ids: list[int] = []
    for path in favolog_paths:
        items = read_favolog_csv(path)
        logger.info(f"[{path}] len={len(items)}")
        ids.extend(item.tweet_id for item in items)
    for path in text_paths:
        status_ids = read_status_txt(path)
        logger.info(f"[{path}] len={len(status_ids)}")
        ids.extend(status_ids)
    return ids
