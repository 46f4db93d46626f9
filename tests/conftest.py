"""Shared fixtures."""
import pytest

from favarchive.store.statuses import StatusStore


@pytest.fixture
def store(tmp_path):
    return StatusStore(tmp_path / "private" / "statuses")
