# file: backend/database.py

import asyncio
import logging
from typing import Any, Dict, List, Set

import aiohttp

from backend.models import RawReading
from backend.store import OnUpdate, ReadingStore, StoreUnavailableError, Unsubscribe


def decode_value(value: Dict[str, Any]) -> Any:
    """Decode a typed Firestore REST value into a plain Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        # RFC 3339 string, resolved later by the timestamp validator
        return value["timestampValue"]
    if "stringValue" in value:
        return value["stringValue"]
    if "mapValue" in value:
        return {key: decode_value(item) for key, item in value["mapValue"].get("fields", {}).items()}
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values", [])]
    if "geoPointValue" in value:
        return value["geoPointValue"]
    return None


def document_to_raw(document: Dict[str, Any]) -> RawReading:
    """Convert a Firestore REST document into a raw reading."""
    data = {key: decode_value(value) for key, value in document.get("fields", {}).items()}
    data.pop("id", None)
    return RawReading(id = document["name"].rsplit("/", 1)[-1], **data)


class FirestoreReadingStore(ReadingStore):
    """Sensor documents of a Firestore collection, read through the REST API.

    The REST API has no push channel, so subscriptions poll the same query
    and deliver a batch whenever the returned documents change.
    """

    def __init__(self, project: str, collection: str = "sensorReadings", database: str = "(default)",
                 api_key: str | None = None, base_url: str = "https://firestore.googleapis.com/v1",
                 poll_seconds: float = 10.0, timeout: float = 10.0):
        self.collection = collection
        self.api_key = api_key
        self.poll_seconds = poll_seconds
        self.timeout = aiohttp.ClientTimeout(total = timeout)
        self.url = f"{base_url}/projects/{project}/databases/{database}/documents:runQuery"
        self._poll_tasks: Set[asyncio.Task] = set()

    def _query(self, n: int) -> Dict[str, Any]:
        return {
            "structuredQuery": {
                "from": [{"collectionId": self.collection}],
                "orderBy": [{"field": {"fieldPath": "timestamp"}, "direction": "DESCENDING"}],
                "limit": n
            }
        }

    async def _run_query(self, n: int) -> List[Dict[str, Any]]:
        params = {"key": self.api_key} if self.api_key else None
        async with aiohttp.ClientSession(timeout = self.timeout) as session:
            async with session.post(self.url, json = self._query(n), params = params) as response:
                response.raise_for_status()
                results = await response.json()
        # Results without a "document" key only carry the read time
        return [result["document"] for result in results if "document" in result]

    async def fetch_recent(self, n: int) -> List[RawReading]:
        try:
            documents = await self._run_query(n)
            return [document_to_raw(document) for document in documents]
        except (aiohttp.ClientError, asyncio.TimeoutError, KeyError, ValueError) as e:
            logging.error(f"Error fetching readings from Firestore: {e}")
            raise StoreUnavailableError(str(e)) from e

    def _deliver(self, on_update: OnUpdate, raw_readings: List[RawReading]) -> None:
        try:
            on_update(raw_readings)
        except Exception as e:
            logging.error(f"Live update listener failed on {len(raw_readings)} readings: {e!r}")

    async def _poll(self, n: int, on_update: OnUpdate) -> None:
        last_signature = None
        while True:
            try:
                documents = await self._run_query(n)
                signature = [(document.get("name"), document.get("updateTime")) for document in documents]
                if signature != last_signature:
                    last_signature = signature
                    self._deliver(on_update, [document_to_raw(document) for document in documents])
            except (aiohttp.ClientError, asyncio.TimeoutError, KeyError, ValueError) as e:
                logging.error(f"Error polling readings from Firestore: {e}")
            await asyncio.sleep(self.poll_seconds)

    async def subscribe_recent(self, n: int, on_update: OnUpdate) -> Unsubscribe:
        task = asyncio.create_task(self._poll(n, on_update))
        self._poll_tasks.add(task)
        logging.info(f"Polling the {n} most recent documents of {self.collection} every {self.poll_seconds}s")

        def unsubscribe() -> None:
            task.cancel()
            logging.info(f"Stopped polling {self.collection}")

        return unsubscribe

    async def close(self) -> None:
        """Cancel any remaining polling tasks and wait for them to finish."""
        tasks, self._poll_tasks = self._poll_tasks, set()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions = True)
