# file: backend/store.py

from abc import ABC, abstractmethod
from typing import Callable, List

from backend import config
from backend.models import RawReading

OnUpdate = Callable[[List[RawReading]], None]
Unsubscribe = Callable[[], None]


class StoreUnavailableError(Exception):
    """The reading store could not be reached or returned an unreadable response."""


class ReadingStore(ABC):
    """Read-only access to the most recent sensor readings."""

    @abstractmethod
    async def fetch_recent(self, n: int) -> List[RawReading]:
        """Return up to n readings, newest first by the stored timestamp."""

    @abstractmethod
    async def subscribe_recent(self, n: int, on_update: OnUpdate) -> Unsubscribe:
        """Deliver the n newest readings on the running loop whenever they change.

        The returned callable tears the subscription down and must be called
        exactly once.
        """

    async def close(self) -> None:
        """Release client resources."""


def create_store() -> ReadingStore:
    """Build the Firestore store from the environment."""
    if not config.FIRESTORE_PROJECT:
        raise ValueError("Missing required FIRESTORE_PROJECT environment variable")

    from backend.database import FirestoreReadingStore
    return FirestoreReadingStore(
        project = config.FIRESTORE_PROJECT,
        collection = config.FIRESTORE_COLLECTION,
        database = config.FIRESTORE_DATABASE,
        api_key = config.FIRESTORE_API_KEY,
        base_url = config.FIRESTORE_URL,
        poll_seconds = config.FIRESTORE_POLL_SECONDS
    )
