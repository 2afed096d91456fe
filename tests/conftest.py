"""
Pytest configuration for the Air Aware tests.

Provides raw reading builders and an in-memory reading store.
"""

from datetime import datetime, timedelta, timezone

import pytest

from backend.models import RawReading, Reading
from backend.store import ReadingStore

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeStore(ReadingStore):
    """Reading store serving a fixed list of documents."""

    def __init__(self, documents=None, error=None):
        self.documents = [RawReading.model_validate(document) for document in documents or []]
        self.error = error
        self.fetch_limits = []
        self.subscribe_limits = []
        self.on_update = None
        self.unsubscribe_calls = 0
        self.closed = False

    async def fetch_recent(self, n):
        self.fetch_limits.append(n)
        if self.error is not None:
            raise self.error
        return self.documents[:n]

    async def subscribe_recent(self, n, on_update):
        self.subscribe_limits.append(n)
        self.on_update = on_update

        def unsubscribe():
            self.unsubscribe_calls += 1

        return unsubscribe

    async def close(self):
        self.closed = True

    def push(self, documents):
        """Simulate the store delivering a live batch."""
        self.on_update([RawReading.model_validate(document) for document in documents])


@pytest.fixture
def raw_reading():
    """Factory for raw store documents; `minutes` is the age relative to BASE_TIME."""
    def build(doc_id="r1", minutes=0, latitude=6.791164, longitude=79.900497, **fields):
        timestamp = (BASE_TIME - timedelta(minutes=minutes)).isoformat()
        return {"id": doc_id, "timestamp": timestamp, "latitude": latitude, "longitude": longitude, **fields}
    return build


@pytest.fixture
def reading():
    """Factory for canonical readings; `minutes` is the age relative to BASE_TIME."""
    def build(doc_id="r1", minutes=0, latitude=6.791164, longitude=79.900497, **fields):
        return Reading(id=doc_id, latitude=latitude, longitude=longitude,
                       valid_timestamp=BASE_TIME - timedelta(minutes=minutes), **fields)
    return build


@pytest.fixture
def fake_store():
    """Factory for in-memory reading stores."""
    return FakeStore
