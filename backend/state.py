# file: backend/state.py

from typing import List

from backend.aqi import calculate_aqi
from backend.config import FALLBACK_READING, HISTORY_SIZE
from backend.models import DashboardState, LocationGroup, Reading
from backend.utils import get_current_time


def build_fallback_reading() -> Reading :
    """Sample reading of the default station, stamped with the current time."""
    now = get_current_time()
    return Reading(
        timestamp = now.isoformat(),
        valid_timestamp = now,
        aqi = calculate_aqi(FALLBACK_READING["pm1"], FALLBACK_READING["pm25"], FALLBACK_READING["pm10"]),
        **FALLBACK_READING
    )


def _accepts(state: DashboardState, candidate: Reading) -> bool :
    """Whether a real reading may replace the current one.

    Fetch results and live batches can arrive in either order, so an older
    reading never replaces a newer one. The fallback reading always yields.
    """
    if state.current is None or state.current_is_fallback :
        return True
    return candidate.valid_timestamp >= state.current.valid_timestamp


def apply_full_fetch(state: DashboardState, readings: List[Reading], groups: List[LocationGroup],
                     fallback: Reading) -> DashboardState :
    """Fold the initial fetch into the state; readings must be newest first."""
    update = {
        "history" : readings[1 : HISTORY_SIZE + 1],
        "location_groups" : groups,
        "selected_index" : None,
        "selected_location_group" : None,
        "location_history" : [],
        "loading" : False,
    }
    if readings :
        if _accepts(state, readings[0]) :
            update.update(current = readings[0], current_is_fallback = False)
    elif state.current is None or state.current_is_fallback :
        update.update(current = fallback, current_is_fallback = True)
    return state.model_copy(update = update)


def apply_live_update(state: DashboardState, readings: List[Reading]) -> DashboardState :
    """Replace only the current reading; history and groups belong to the full fetch."""
    if not readings or not _accepts(state, readings[0]) :
        return state
    return state.model_copy(update = {"current" : readings[0], "current_is_fallback" : False})


def apply_store_failure(state: DashboardState, fallback: Reading) -> DashboardState :
    update = {"loading" : False}
    if state.current is None or state.current_is_fallback :
        update.update(current = fallback, current_is_fallback = True)
    return state.model_copy(update = update)


def select_location_group(state: DashboardState, index: int) -> DashboardState :
    """Select a map marker's group; raises IndexError for an unknown index."""
    if not 0 <= index < len(state.location_groups) :
        raise IndexError(f"No location group at index {index}")
    group = state.location_groups[index]
    return state.model_copy(update = {
        "selected_index" : index,
        "selected_location_group" : group,
        "location_history" : group.readings[:HISTORY_SIZE],
    })


def clear_selection(state: DashboardState) -> DashboardState :
    return state.model_copy(update = {"selected_index" : None, "selected_location_group" : None,
                                      "location_history" : []})


def history_view(state: DashboardState) -> List[Reading] :
    """History shown in the panel: the selected location's, else the global one."""
    if state.selected_location_group is not None :
        return state.location_history
    return state.history
