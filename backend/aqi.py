# file: backend/aqi.py

import math
from typing import Dict, List, Tuple

from backend.models import AqiCategory, AqiResult

# (upper pm2.5 bound, low pm2.5, low AQI, high pm2.5, high AQI); last segment is open-ended
PM25_BREAKPOINTS : List[Tuple[float, float, int, float, int]] = [
    (12.0, 0.0, 0, 12.0, 50),
    (35.4, 12.1, 51, 35.4, 100),
    (55.4, 35.5, 101, 55.4, 150),
    (150.4, 55.5, 151, 150.4, 200),
    (250.4, 150.5, 201, 250.4, 300),
    (math.inf, 250.5, 301, 500.0, 500),
]

MAX_AQI = 500

# (upper AQI bound, category, advice, range label, range class)
AQI_BANDS = [
    (50, AqiCategory.GOOD, "Enjoy outdoor activities freely.", "AQI (0-50)", "good"),
    (100, AqiCategory.MODERATE, "Sensitive groups should limit prolonged outdoor exertion.", "AQI (51-100)",
     "moderate"),
    (150, AqiCategory.UNHEALTHY_FOR_SENSITIVE_GROUPS, "Sensitive individuals should reduce outdoor activity.",
     "AQI (101-150)", "unhealthy-sensitive"),
    (200, AqiCategory.UNHEALTHY, "Everyone should limit prolonged outdoor exertion.", "AQI (151-200)", "unhealthy"),
    (250, AqiCategory.VERY_UNHEALTHY, "Avoid outdoor activities; wear masks if going outside.", "AQI (201-250)",
     "very-unhealthy"),
    (300, AqiCategory.SEVERE, "Stay indoors; use air purifiers and avoid any outdoor exposure.", "AQI (251-300)",
     "severe"),
    (math.inf, AqiCategory.HAZARDOUS, "Remain indoors with sealed windows and avoid all outdoor activities.",
     "AQI (301-500)", "hazardous"),
]


def _round_half_up(value: float) -> int :
    return int(math.floor(value + 0.5))


def calculate_aqi(pm1: float, pm25: float, pm10: float) -> int :
    """Calculate AQI using the EPA PM2.5 breakpoints.

    PM1 and PM10 are accepted for call-site symmetry with the sensor payload
    but do not take part in the calculation.
    """
    for upper, bp_lo, aqi_lo, bp_hi, aqi_hi in PM25_BREAKPOINTS :
        if pm25 <= upper :
            aqi = aqi_lo + ((aqi_hi - aqi_lo) / (bp_hi - bp_lo)) * (pm25 - bp_lo)
            return min(_round_half_up(aqi), MAX_AQI)
    # NaN compares false against every bound
    return MAX_AQI


def _band(aqi: float) :
    for band in AQI_BANDS :
        if aqi <= band[0] :
            return band
    return AQI_BANDS[-1]


def get_aqi_category(aqi: float) -> AqiCategory :
    return _band(aqi)[1]


def get_aqi_status(aqi: float) -> Dict[str, str] :
    """Return the status text and health advice for an AQI score."""
    _, category, advice, _, _ = _band(aqi)
    return {"status" : category.value, "advice" : advice}


def get_aqi_range_label(aqi: float) -> str :
    return _band(aqi)[3]


def get_aqi_range_class(aqi: float) -> str :
    return _band(aqi)[4]


def evaluate_aqi(aqi: int) -> AqiResult :
    """Bundle score, category, advice and band for display."""
    _, category, advice, label, css_class = _band(aqi)
    return AqiResult(score = aqi, category = category, advisory = advice, range_label = label,
                     range_class = css_class)
