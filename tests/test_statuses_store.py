"""Tests for the flat-file status cache."""
import asyncio
import json

from favarchive.models import StatusRecord
from tests.fakes import ok_body


def put(store, record):
    asyncio.run(store.put(record))


def test_missing_record_is_none(store):
    assert store.get(1) is None
    assert store.is_success(1) is False


def test_put_then_get(store):
    put(store, StatusRecord(id="10", complete=True, fxtwitter_data=ok_body(10, 1600000000), saved_at=5))
    record = store.get(10)
    assert record.is_success()
    assert record.timestamp() == 1600000000
    assert store.is_success(10)


def test_file_layout(store):
    """Records are indented JSON named after the status id."""
    put(store, StatusRecord(id="11", complete=True, saved_at=5))
    path = store.statuses_dir / "11.json"
    text = path.read_text()
    assert text.startswith("{\n  ")
    assert json.loads(text) == {
        "id": "11",
        "complete": True,
        "fxtwitter_data": None,
        "saved_at": 5,
        "error": None,
    }


def test_put_overwrites(store):
    put(store, StatusRecord(id="12", complete=False, saved_at=1, error="boom"))
    put(store, StatusRecord(id="12", complete=True, saved_at=2))
    record = store.get(12)
    assert record.complete
    assert record.error is None


def test_unreadable_record_is_none(store):
    store.statuses_dir.mkdir(parents=True)
    (store.statuses_dir / "13.json").write_text("{not json")
    assert store.get(13) is None


def test_list_ids_includes_every_record(store):
    put(store, StatusRecord(id="1", complete=True, fxtwitter_data=ok_body(1), saved_at=1))
    put(store, StatusRecord(id="2", complete=True, saved_at=1))
    put(store, StatusRecord(id="3", complete=False, saved_at=1, error="status code: 500"))
    assert store.list_ids() == [1, 2, 3]


def test_list_ids_empty_cache(store):
    assert store.list_ids() == []
