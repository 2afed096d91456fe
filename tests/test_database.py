"""
Tests for the Firestore REST reading store.

Network calls are replaced by patching FirestoreReadingStore._run_query.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from backend import config
from backend.database import FirestoreReadingStore, decode_value, document_to_raw
from backend.store import StoreUnavailableError, create_store


def firestore_document(doc_id, update_time="2025-06-01T12:00:01Z", **fields):
    return {
        "name": f"projects/demo/databases/(default)/documents/sensorReadings/{doc_id}",
        "fields": fields,
        "updateTime": update_time,
    }


SAMPLE = firestore_document(
    "abc123",
    latitude={"doubleValue": 6.7912},
    longitude={"doubleValue": 79.9005},
    pm25={"integerValue": "18"},
    windSpeed={"doubleValue": 2.5},
    windDirection={"stringValue": "NE"},
    deviceId={"stringValue": "esp32-01"},
    timestamp={"timestampValue": "2025-06-01T12:00:00.123456Z"},
)


class TestDecodeValue:

    @pytest.mark.parametrize("value, expected", [
        ({"nullValue": None}, None),
        ({"booleanValue": True}, True),
        ({"integerValue": "42"}, 42),
        ({"doubleValue": 1.5}, 1.5),
        ({"stringValue": "N"}, "N"),
        ({"timestampValue": "2025-01-01T00:00:00Z"}, "2025-01-01T00:00:00Z"),
        ({"arrayValue": {"values": [{"integerValue": "1"}, {"stringValue": "a"}]}}, [1, "a"]),
        ({"arrayValue": {}}, []),
        ({"mapValue": {"fields": {"seconds": {"integerValue": "1740000000"}}}}, {"seconds": 1740000000}),
        ({"geoPointValue": {"latitude": 1.0, "longitude": 2.0}}, {"latitude": 1.0, "longitude": 2.0}),
        ({}, None),
    ])
    def test_values(self, value, expected):
        assert decode_value(value) == expected


class TestDocumentToRaw:

    def test_fields_and_id(self):
        raw = document_to_raw(SAMPLE)

        assert raw.id == "abc123"
        assert raw.latitude == 6.7912
        assert raw.pm25 == 18
        assert raw.wind_speed == 2.5
        assert raw.wind_direction == "NE"
        assert raw.device_id == "esp32-01"
        assert raw.timestamp == "2025-06-01T12:00:00.123456Z"

    def test_document_without_fields(self):
        raw = document_to_raw({"name": "projects/demo/databases/(default)/documents/sensorReadings/empty"})
        assert raw.id == "empty"
        assert raw.timestamp is None

    def test_stored_id_field_does_not_override_document_id(self):
        raw = document_to_raw(firestore_document("real", id={"stringValue": "fake"}))
        assert raw.id == "real"


class TestFirestoreReadingStore:

    @pytest.fixture
    def store(self):
        return FirestoreReadingStore(project="demo", api_key="key", poll_seconds=0.01)

    def test_query_orders_by_timestamp_descending(self, store):
        query = store._query(100)["structuredQuery"]

        assert query["from"] == [{"collectionId": "sensorReadings"}]
        assert query["orderBy"] == [{"field": {"fieldPath": "timestamp"}, "direction": "DESCENDING"}]
        assert query["limit"] == 100
        assert store.url == "https://firestore.googleapis.com/v1/projects/demo/databases/(default)/documents:runQuery"

    def test_fetch_recent(self, store):
        with patch.object(store, "_run_query", AsyncMock(return_value=[SAMPLE])) as run_query:
            readings = asyncio.run(store.fetch_recent(100))

        run_query.assert_awaited_once_with(100)
        assert [r.id for r in readings] == ["abc123"]

    @pytest.mark.parametrize("error", [aiohttp.ClientError("boom"), asyncio.TimeoutError(), ValueError("bad json")])
    def test_fetch_errors_become_store_unavailable(self, store, error):
        with patch.object(store, "_run_query", AsyncMock(side_effect=error)):
            with pytest.raises(StoreUnavailableError):
                asyncio.run(store.fetch_recent(100))

    def test_subscription_delivers_only_changes(self, store):
        updated = firestore_document("abc123", update_time="2025-06-01T12:05:00Z")
        run_query = AsyncMock(side_effect=[[SAMPLE], [SAMPLE], [updated]] + [[updated]] * 100)
        batches = []

        async def scenario():
            unsubscribe = await store.subscribe_recent(10, batches.append)
            while run_query.await_count < 5:
                await asyncio.sleep(0.01)
            unsubscribe()

        with patch.object(store, "_run_query", run_query):
            asyncio.run(scenario())

        assert len(batches) == 2
        assert [r.id for r in batches[0]] == ["abc123"]
        run_query.assert_awaited_with(10)

    def test_subscription_survives_errors(self, store):
        run_query = AsyncMock(side_effect=[aiohttp.ClientError("down"), [SAMPLE]] + [[SAMPLE]] * 100)
        batches = []

        async def scenario():
            unsubscribe = await store.subscribe_recent(10, batches.append)
            while run_query.await_count < 3:
                await asyncio.sleep(0.01)
            unsubscribe()

        with patch.object(store, "_run_query", run_query):
            asyncio.run(scenario())

        assert len(batches) == 1

    def test_failing_listener_does_not_stop_polling(self, store, caplog):
        updated = firestore_document("abc123", update_time="2025-06-01T12:05:00Z")
        run_query = AsyncMock(side_effect=[[SAMPLE], [updated]] + [[updated]] * 100)
        batches = []

        def listener(raw_readings):
            batches.append(raw_readings)
            if len(batches) == 1:
                raise RuntimeError("listener broke")

        async def scenario():
            unsubscribe = await store.subscribe_recent(10, listener)
            while run_query.await_count < 4:
                await asyncio.sleep(0.01)
            unsubscribe()
            await store.close()

        with patch.object(store, "_run_query", run_query):
            asyncio.run(scenario())

        assert len(batches) == 2
        assert "listener broke" in caplog.text

    def test_close_waits_for_polling_tasks(self, store):
        run_query = AsyncMock(return_value=[SAMPLE])

        async def scenario():
            await store.subscribe_recent(10, lambda raw_readings: None)
            await asyncio.sleep(0.02)
            await store.close()
            return [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]

        with patch.object(store, "_run_query", run_query):
            pending = asyncio.run(scenario())

        assert pending == []


class TestCreateStore:

    def test_requires_project(self, monkeypatch):
        monkeypatch.setattr(config, "FIRESTORE_PROJECT", None)
        with pytest.raises(ValueError):
            create_store()

    def test_builds_firestore_store(self, monkeypatch):
        monkeypatch.setattr(config, "FIRESTORE_PROJECT", "air-aware")
        monkeypatch.setattr(config, "FIRESTORE_COLLECTION", "readings")
        store = create_store()

        assert isinstance(store, FirestoreReadingStore)
        assert "/projects/air-aware/" in store.url
        assert store.collection == "readings"
