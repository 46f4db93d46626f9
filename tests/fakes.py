"""Fake API responses and client builders for tests."""
import httpx

from favarchive.fetch.client import FxTwitterClient

BASE_URL = "https://api.example.test"


def ok_body(status_id: int, created_timestamp: int = 1700000000) -> dict:
    return {
        "code": 200,
        "message": "OK",
        "tweet": {
            "id": str(status_id),
            "text": f"tweet {status_id}",
            "created_timestamp": created_timestamp,
            "author": {"id": "42", "name": "Someone", "screen_name": "someone"},
            "likes": 3,
        },
    }


def make_client(handler) -> FxTwitterClient:
    return FxTwitterClient(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(handler))


def status_id_of(request: httpx.Request) -> int:
    return int(request.url.path.rsplit("/", 1)[-1])
