"""Exceptions raised while archiving and publishing statuses."""
from typing import Optional


class ArchiveError(Exception):
    """Base class for archiver errors."""


class TooManyRequests(ArchiveError):
    """The metadata source answered 429; back off and retry."""


class StatusNotFound(ArchiveError):
    """The metadata source answered 404 for a status."""


class FetchError(ArchiveError):
    """Transport or protocol failure that should not be retried."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RetryLimitExceeded(ArchiveError):
    """Still overloaded after every allowed attempt."""


class PersistenceError(ArchiveError):
    """Reading or writing a local JSON file failed."""


class SourceFormatError(ArchiveError):
    """An input file could not be parsed into status ids."""
