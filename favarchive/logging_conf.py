"""Logging setup for the CLI."""
import logging
from typing import Optional

from favarchive.config import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the whole process."""
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
