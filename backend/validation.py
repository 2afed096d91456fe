# file: backend/validation.py

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from numbers import Number
from typing import Any, Iterable, List

import pandas as pd

from backend.aqi import calculate_aqi
from backend.config import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_WIND_DIRECTION, MIN_VALID_YEAR
from backend.models import RawReading, Reading
from backend.utils import as_utc

NUMERIC_DEFAULTS = {
    "latitude" : DEFAULT_LATITUDE,
    "longitude" : DEFAULT_LONGITUDE,
    "temperature" : 0.0,
    "humidity" : 0.0,
    "voc" : 0.0,
    "pm1" : 0.0,
    "pm25" : 0.0,
    "pm10" : 0.0,
    "rainfall" : 0.0,
    "wind_speed" : 0.0,
    "co2" : 0.0,
}

# pandas resolves these to the current time instead of rejecting them
RELATIVE_DATE_WORDS = {"now", "today"}


def _epoch_seconds(value: Any) :
    if isinstance(value, Mapping) :
        return value.get("seconds")
    return getattr(value, "seconds", None)


def _parse(value: Any) -> datetime | None :
    seconds = _epoch_seconds(value)
    if seconds :
        parsed = pd.to_datetime(float(seconds) * 1000, unit = "ms", utc = True)
    elif isinstance(value, datetime) :
        return as_utc(value)
    elif isinstance(value, Number) :
        parsed = pd.to_datetime(value, unit = "ms", utc = True)
    elif isinstance(value, str) :
        if value.strip().lower() in RELATIVE_DATE_WORDS :
            return None
        parsed = pd.to_datetime(value, utc = True)
    else :
        return None
    if pd.isna(parsed) :
        return None
    return parsed.to_pydatetime()


def validate_timestamp(timestamp: Any) -> datetime | None :
    """Resolve a raw timestamp to an aware UTC datetime, or None when it is unusable.

    Accepts epoch-seconds wrappers (Firestore timestamps and their JSON form),
    native datetimes, epoch milliseconds and date strings. Anything that cannot
    be parsed, and anything dated before MIN_VALID_YEAR, yields None.
    """
    if not timestamp :
        return None
    try :
        resolved = _parse(timestamp)
    except (TypeError, ValueError, OverflowError) :
        return None
    if resolved is None or resolved.year < MIN_VALID_YEAR :
        return None
    return resolved


def _number(raw: RawReading, field: str) -> float :
    value = getattr(raw, field)
    default = NUMERIC_DEFAULTS[field]
    if not value :
        return default
    try :
        number = float(value)
    except (TypeError, ValueError) :
        logging.warning(f"Reading {raw.id!r}: non-numeric {field} {value!r}, using {default}")
        return default
    # NaN counts as missing
    return default if math.isnan(number) else number


def to_reading(raw: RawReading, valid_timestamp: datetime) -> Reading :
    """Build a canonical reading, replacing missing fields with their defaults."""
    values = {field : _number(raw, field) for field in NUMERIC_DEFAULTS}
    return Reading(
        id = str(raw.id or ""),
        wind_direction = str(raw.wind_direction or DEFAULT_WIND_DIRECTION),
        device_id = str(raw.device_id or ""),
        timestamp = raw.timestamp,
        valid_timestamp = valid_timestamp,
        aqi = calculate_aqi(values["pm1"], values["pm25"], values["pm10"]),
        **values
    )


def filter_valid_readings(raw_readings: Iterable[RawReading | Mapping]) -> List[Reading] :
    """Drop readings without a usable timestamp and sort the rest newest first."""
    readings = []
    for raw in raw_readings :
        if not isinstance(raw, RawReading) :
            raw = RawReading.model_validate(dict(raw))
        valid_timestamp = validate_timestamp(raw.timestamp)
        if valid_timestamp is None :
            logging.warning(f"Skipping reading {raw.id!r} with invalid timestamp: {raw.timestamp!r}")
            continue
        readings.append(to_reading(raw, valid_timestamp))

    # list.sort is stable, so readings sharing a timestamp keep their store order
    readings.sort(key = lambda reading : reading.valid_timestamp, reverse = True)
    return readings
