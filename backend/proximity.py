# file: backend/proximity.py

import math
from typing import List

from backend.config import EARTH_RADIUS_M, MAX_LOCATION_GROUPS, PROXIMITY_THRESHOLD_M
from backend.models import LocationGroup, LocationMarker, Reading


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float :
    """Great-circle distance between two coordinates in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def group_locations_by_proximity(readings: List[Reading],
                                 threshold_m: float = PROXIMITY_THRESHOLD_M,
                                 max_groups: int = MAX_LOCATION_GROUPS) -> List[LocationGroup] :
    """Group newest-first readings into the most recently active locations.

    Each reading joins the first group whose anchor lies within threshold_m;
    otherwise it anchors a new group. Anchors stay where the first reading put
    them, so the result depends on input order. At most max_groups groups are
    created.
    """
    groups : List[LocationGroup] = []

    for reading in readings :
        for group in groups :
            distance = haversine_distance(reading.latitude, reading.longitude, group.latitude, group.longitude)
            if distance <= threshold_m :
                group.readings.append(reading)
                break
        else :
            # Readings of older locations beyond the limit are left ungrouped
            if len(groups) < max_groups :
                groups.append(LocationGroup(latitude = reading.latitude, longitude = reading.longitude,
                                            readings = [reading]))

    return groups


def build_location_markers(groups: List[LocationGroup]) -> List[LocationMarker] :
    """One map marker per group, showing the group's most recent reading."""
    return [
        LocationMarker(id = f"location-{index}", index = index, latitude = group.latitude,
                       longitude = group.longitude, is_latest = index == 0, reading = group.readings[0])
        for index, group in enumerate(groups)
        if group.readings
    ]
