#file: backend/models.py

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class RawReading(BaseModel):
    """Sensor document as stored; every field is optional and untyped."""
    model_config = ConfigDict(populate_by_name = True, extra = "ignore")

    id: Any = Field(None, description = "Document identifier assigned by the store")
    latitude: Any = None
    longitude: Any = None
    temperature: Any = None
    humidity: Any = None
    voc: Any = None
    pm1: Any = None
    pm25: Any = None
    pm10: Any = None
    rainfall: Any = None
    wind_speed: Any = Field(None, alias = "windSpeed")
    wind_direction: Any = Field(None, alias = "windDirection")
    co2: Any = None
    device_id: Any = Field(None, alias = "deviceId")
    timestamp: Any = None


class Reading(BaseModel):
    id: str = Field("", description = "Document identifier assigned by the store")
    latitude: float = Field(..., description = "Latitude in degrees")
    longitude: float = Field(..., description = "Longitude in degrees")
    temperature: float = Field(0.0, description = "Temperature (°C)")
    humidity: float = Field(0.0, description = "Relative humidity (%)")
    voc: float = Field(0.0, description = "Volatile organic compounds (ppb)")
    pm1: float = Field(0.0, description = "PM1 concentration (µg/m³)")
    pm25: float = Field(0.0, description = "PM2.5 concentration (µg/m³)")
    pm10: float = Field(0.0, description = "PM10 concentration (µg/m³)")
    rainfall: float = Field(0.0, description = "Rainfall (mm)")
    wind_speed: float = Field(0.0, description = "Wind speed (m/s)")
    wind_direction: str = Field("N", description = "Compass label of the wind direction")
    co2: float = Field(0.0, description = "CO2 concentration (ppm)")
    device_id: str = Field("", description = "Identifier of the reporting device")
    timestamp: Any = Field(None, exclude = True, description = "Timestamp exactly as received from the store")
    valid_timestamp: datetime = Field(..., description = "Resolved UTC time of the reading")
    aqi: int = Field(0, description = "AQI derived from the PM2.5 concentration")


class LocationGroup(BaseModel):
    latitude: float = Field(..., description = "Anchor latitude, taken from the first reading of the group")
    longitude: float = Field(..., description = "Anchor longitude, taken from the first reading of the group")
    readings: List[Reading] = Field(default_factory = list, description = "Readings of this location, most recent first")


class LocationMarker(BaseModel):
    id: str
    index: int
    latitude: float
    longitude: float
    is_latest: bool
    reading: Reading


class AqiCategory(str, Enum):
    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY_FOR_SENSITIVE_GROUPS = "Unhealthy for Sensitive Groups"
    UNHEALTHY = "Unhealthy"
    VERY_UNHEALTHY = "Very Unhealthy"
    SEVERE = "Severe"
    HAZARDOUS = "Hazardous"


class AqiResult(BaseModel):
    score: int = Field(..., description = "AQI score")
    category: AqiCategory
    advisory: str = Field(..., description = "Health guidance for the category")
    range_label: str = Field(..., description = "AQI band, e.g. 'AQI (0-50)'")
    range_class: str = Field(..., description = "Tag used to colour the AQI band")


class DashboardState(BaseModel):
    """Snapshot of everything the presentation layer renders."""
    model_config = ConfigDict(frozen = True)

    current: Optional[Reading] = None
    current_is_fallback: bool = False
    history: List[Reading] = Field(default_factory = list)
    location_groups: List[LocationGroup] = Field(default_factory = list)
    selected_index: Optional[int] = None
    selected_location_group: Optional[LocationGroup] = None
    location_history: List[Reading] = Field(default_factory = list)
    loading: bool = True


class CurrentReading(BaseModel):
    reading: Reading
    aqi: AqiResult
    is_fallback: bool = Field(False, description = "True when the store had no usable reading")


class DashboardSnapshot(BaseModel):
    loading: bool
    current: Optional[CurrentReading] = None
    history: List[Reading] = Field(default_factory = list, description = "Selected location's history, else the global one")
    markers: List[LocationMarker] = Field(default_factory = list)
    selected_index: Optional[int] = None
    selected_location_group: Optional[LocationGroup] = None
