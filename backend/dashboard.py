# file: backend/dashboard.py

import logging
from typing import Callable, List

from backend import state as reducers
from backend.config import FETCH_LIMIT, LIVE_LIMIT
from backend.models import DashboardState, RawReading
from backend.proximity import group_locations_by_proximity
from backend.store import ReadingStore, StoreUnavailableError, Unsubscribe
from backend.validation import filter_valid_readings

Listener = Callable[[DashboardState], None]


class DashboardController:
    """Owns the dashboard state and feeds it from a reading store.

    State is only replaced through the reducers in backend.state; listeners
    receive every new snapshot. All methods run on one event loop.
    """

    def __init__(self, store: ReadingStore, fetch_limit: int = FETCH_LIMIT, live_limit: int = LIVE_LIMIT):
        self.store = store
        self.fetch_limit = fetch_limit
        self.live_limit = live_limit
        self._state = DashboardState()
        self._listeners: List[Listener] = []
        self._unsubscribe: Unsubscribe | None = None
        self._active = False

    @property
    def state(self) -> DashboardState:
        return self._state

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set_state(self, new_state: DashboardState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    async def start(self) -> None:
        """Subscribe to live updates, then run the initial fetch."""
        self._active = True
        try:
            self._unsubscribe = await self.store.subscribe_recent(self.live_limit, self._on_live_update)
        except StoreUnavailableError as e:
            logging.error(f"Live updates unavailable: {e}")
        await self.refresh()

    async def refresh(self) -> None:
        """Full fetch: rebuilds current reading, history and location groups."""
        fallback = reducers.build_fallback_reading()
        try:
            raw_readings = await self.store.fetch_recent(self.fetch_limit)
        except StoreUnavailableError as e:
            logging.error(f"Error fetching readings, showing fallback data: {e}")
            self._set_state(reducers.apply_store_failure(self._state, fallback))
            return

        readings = filter_valid_readings(raw_readings)
        logging.info(f"Found {len(readings)} valid readings out of {len(raw_readings)}")
        if not readings:
            logging.warning("No valid readings found, using fallback data")

        groups = group_locations_by_proximity(readings)
        self._set_state(reducers.apply_full_fetch(self._state, readings, groups, fallback))
        if self._state.current is not None:
            logging.info(f"Current reading timestamp: {self._state.current.valid_timestamp.isoformat()}")

    def _on_live_update(self, raw_readings: List[RawReading]) -> None:
        if not self._active:
            return
        readings = filter_valid_readings(raw_readings)
        if readings:
            logging.info(f"Live update - newest valid reading: {readings[0].valid_timestamp.isoformat()}")
        self._set_state(reducers.apply_live_update(self._state, readings))

    def select_location_group(self, index: int) -> DashboardState:
        self._set_state(reducers.select_location_group(self._state, index))
        return self._state

    def clear_selection(self) -> DashboardState:
        self._set_state(reducers.clear_selection(self._state))
        return self._state

    async def stop(self) -> None:
        """Tear down the live subscription; later deliveries are ignored."""
        self._active = False
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        await self.store.close()
