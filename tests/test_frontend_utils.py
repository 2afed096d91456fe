"""
Tests for the frontend data helpers that shape API payloads for Streamlit.
"""

import pytest

from frontend.utils import format_timestamp, history_to_frame, location_options, markers_to_frame


def api_reading(doc_id, timestamp="2025-06-01T12:00:00Z", **fields):
    reading = {"id": doc_id, "latitude": 6.791164, "longitude": 79.900497, "temperature": 30.0, "humidity": 80.0,
               "voc": 140.0, "pm1": 1.0, "pm25": 12.0, "pm10": 20.0, "rainfall": 0.0, "wind_speed": 1.0,
               "wind_direction": "N", "co2": 400.0, "device_id": "", "valid_timestamp": timestamp, "aqi": 50}
    reading.update(fields)
    return reading


def api_marker(index, latitude, longitude):
    return {"id": f"location-{index}", "index": index, "latitude": latitude, "longitude": longitude,
            "is_latest": index == 0, "reading": api_reading(f"r{index}", latitude=latitude, longitude=longitude)}


class TestFormatTimestamp:

    def test_iso_timestamp(self):
        assert format_timestamp("2025-06-01T12:00:00Z") == "2025-06-01 12:00:00"

    def test_offset_is_shown_in_utc(self):
        assert format_timestamp("2025-06-01T17:30:00+05:30") == "2025-06-01 12:00:00"

    @pytest.mark.parametrize("value", [None, "", "garbage"])
    def test_invalid(self, value):
        assert format_timestamp(value) == "Invalid date"


class TestMarkersToFrame:

    def test_rows_per_marker(self):
        df = markers_to_frame([api_marker(0, 6.79, 79.90), api_marker(1, 6.80, 79.91)])

        assert list(df["id"]) == ["location-0", "location-1"]
        assert list(df["marker"]) == ["Latest", "Earlier"]
        assert list(df["lat"]) == [6.79, 6.80]
        assert df.loc[0, "updated"] == "2025-06-01 12:00:00"
        assert df.loc[1, "name"] == "6.8000, 79.9100"

    def test_no_markers(self):
        df = markers_to_frame([])
        assert df.empty
        assert {"lat", "lon", "marker"} <= set(df.columns)


class TestHistoryToFrame:

    def test_columns_and_limit(self):
        readings = [api_reading(f"r{i}", timestamp=f"2025-06-01T12:0{i}:00Z") for i in range(7)]
        df = history_to_frame(readings)

        assert len(df) == 5
        assert list(df.columns) == ["Time", "T (°C)", "H (%)", "VOC (ppb)", "PM2.5 (μg/m³)"]
        assert df.iloc[0]["Time"] == "2025-06-01 12:00:00"

    def test_empty_history(self):
        df = history_to_frame([])
        assert df.empty
        assert "Time" in df.columns


class TestLocationOptions:

    def test_labels(self):
        options = location_options([api_marker(0, 6.79, 79.90), api_marker(1, 6.80, 79.91)])
        assert options == {0: "Location 1 (6.7900, 79.9000)", 1: "Location 2 (6.8000, 79.9100)"}
