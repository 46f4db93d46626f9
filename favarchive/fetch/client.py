"""HTTP client for the status metadata API."""
import logging
from typing import Optional
import httpx
from pydantic import ValidationError

from favarchive.config import config
from favarchive.errors import FetchError, StatusNotFound, TooManyRequests
from favarchive.models import FixTwitterResponse

logger = logging.getLogger(__name__)


class FxTwitterClient:
    """Fetches one status per request and maps HTTP outcomes to archiver errors."""

    def __init__(
        self,
        base_url: str = config.FXTWITTER_API_URL,
        timeout: float = config.TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        limits = httpx.Limits(
            max_connections=100,
            max_keepalive_connections=20,
        )
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=timeout,
            limits=limits,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    def status_url(self, status_id: int) -> str:
        return f"{self.base_url}/status/{status_id}"

    async def fetch_status(self, status_id: int) -> FixTwitterResponse:
        """Fetch metadata for one status.

        Raises StatusNotFound on 404, TooManyRequests on 429 and FetchError for
        any other status or transport failure.
        """
        url = self.status_url(status_id)
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed for {url}: {e!r}") from e

        if response.status_code == 200:
            try:
                return FixTwitterResponse.model_validate_json(response.content)
            except ValidationError as e:
                raise FetchError(f"Invalid response body for {url}: {e}", 200) from e
        if response.status_code == 404:
            raise StatusNotFound(url)
        if response.status_code == 429:
            raise TooManyRequests(url)

        body = response.text
        if body.startswith("error code:"):
            raise FetchError(f"error code: {body.removeprefix('error code:').strip()}", response.status_code)
        raise FetchError(f"status code: {response.status_code}", response.status_code)
