"""Data models for cached statuses and published files."""
import logging
from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class Author(BaseModel):
    id: str
    name: str
    screen_name: str


class Tweet(BaseModel):
    """Decoded subset of the raw tweet payload."""

    id: str
    text: str = ""
    created_timestamp: int
    author: Author


class FixTwitterResponse(BaseModel):
    """Body returned by the metadata API for one status."""

    code: int
    message: str
    tweet: Optional[dict[str, Any]] = Field(default=None, description="Raw tweet, kept verbatim")

    def is_success(self) -> bool:
        return self.code == 200 and self.message == "OK"

    def parse_tweet(self) -> Optional[Tweet]:
        """Decode the raw tweet, or None if the response failed or is malformed."""
        if not self.is_success() or self.tweet is None:
            return None
        try:
            return Tweet.model_validate(self.tweet)
        except ValidationError as e:
            logger.debug(f"Undecodable tweet payload: {e}")
            return None


class StatusRecord(BaseModel):
    """Cached outcome of fetching one status id."""

    id: str = Field(..., description="Status id (primary key)")
    complete: bool = Field(default=False, description="True once the source gave a definitive answer")
    fxtwitter_data: Optional[FixTwitterResponse] = None
    saved_at: int = Field(..., description="Unix seconds")
    error: Optional[str] = Field(default=None, description="Last fetch error, if any")

    def is_success(self) -> bool:
        return self.fxtwitter_data is not None and self.fxtwitter_data.is_success()

    def is_not_found(self) -> bool:
        return self.complete and self.fxtwitter_data is None

    def timestamp(self) -> Optional[int]:
        """Creation time of the tweet in Unix seconds, when known."""
        if not self.is_success():
            return None
        tweet = self.fxtwitter_data.parse_tweet()
        return tweet.created_timestamp if tweet else None


class StatusEntry(BaseModel):
    id: str
    ts: int


class Page(BaseModel):
    """One published page; the id is also its path under pages/."""

    id: str
    statuses: list[StatusEntry]
    created_at: int


class BatchLinked(BaseModel):
    """Published manifest of a batch, linked to the batch exported before it."""

    id: str
    head: bool
    pages: list[str]
    next: Optional[str] = None
    created_at: int
    updated_at: int
    update_nonce: str

    def __str__(self) -> str:
        kind = "HeadLink" if self.head else "MergedLink"
        return f"{kind}-{self.id}{self.pages}"


class CurrentPointer(BaseModel):
    head: Optional[str] = None
    last: Optional[str] = None
    updated_at: int = 0
