#file: frontend/utils.py

import pandas as pd

HISTORY_COLUMNS = {"valid_timestamp" : "Time", "temperature" : "T (°C)", "humidity" : "H (%)", "voc" : "VOC (ppb)",
    "pm25" : "PM2.5 (μg/m³)"}


def format_timestamp(value) :
    """Render an ISO timestamp from the API as 'YYYY-MM-DD HH:MM:SS' (UTC)."""
    if not value :
        return "Invalid date"
    timestamp = pd.to_datetime(value, errors = "coerce", utc = True)
    if pd.isna(timestamp) :
        return "Invalid date"
    return timestamp.strftime("%Y-%m-%d %H:%M:%S")


def markers_to_frame(markers) :
    """Convert location markers into a DataFrame for the map."""
    if not markers :
        return pd.DataFrame(columns = ["id", "index", "lat", "lon", "name", "marker", "aqi"])

    rows = []
    for marker in markers :
        reading = marker["reading"]
        rows.append({
            "id" : marker["id"],
            "index" : marker["index"],
            "lat" : marker["latitude"],
            "lon" : marker["longitude"],
            "name" : f"{marker['latitude']:.4f}, {marker['longitude']:.4f}",
            "marker" : "Latest" if marker["is_latest"] else "Earlier",
            "aqi" : reading["aqi"],
            "temperature" : reading["temperature"],
            "humidity" : reading["humidity"],
            "voc" : reading["voc"],
            "pm25" : reading["pm25"],
            "pm10" : reading["pm10"],
            "pm1" : reading["pm1"],
            "updated" : format_timestamp(reading["valid_timestamp"]),
        })
    return pd.DataFrame(rows)


def history_to_frame(readings, limit = 5) :
    """Convert history readings into a DataFrame for the history panel."""
    if not readings :
        return pd.DataFrame(columns = list(HISTORY_COLUMNS.values()))

    df = pd.DataFrame(readings[:limit])[list(HISTORY_COLUMNS)]
    df["valid_timestamp"] = df["valid_timestamp"].map(format_timestamp)
    return df.rename(columns = HISTORY_COLUMNS)


def location_options(markers) :
    """Labels for the location picker, keyed by marker index."""
    return {marker["index"] : f"Location {marker['index'] + 1} ({marker['latitude']:.4f}, {marker['longitude']:.4f})"
        for marker in markers}
