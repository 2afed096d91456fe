# file: backend/config.py

import os
from dotenv import load_dotenv

load_dotenv()

FIRESTORE_URL = os.getenv("FIRESTORE_URL", "https://firestore.googleapis.com/v1")
FIRESTORE_PROJECT = os.getenv("FIRESTORE_PROJECT")
FIRESTORE_DATABASE = os.getenv("FIRESTORE_DATABASE", "(default)")
FIRESTORE_API_KEY = os.getenv("FIRESTORE_API_KEY")
FIRESTORE_COLLECTION = os.getenv("FIRESTORE_COLLECTION", "sensorReadings")
FIRESTORE_POLL_SECONDS = float(os.getenv("FIRESTORE_POLL_SECONDS", "10"))

# Over-fetch on the initial load to compensate for readings dropped by validation
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "100"))
LIVE_LIMIT = int(os.getenv("LIVE_LIMIT", "10"))
HISTORY_SIZE = 5

MAX_LOCATION_GROUPS = 5
PROXIMITY_THRESHOLD_M = 5.0
EARTH_RADIUS_M = 6371e3

# Readings stamped before this year are placeholders from unsynced device clocks
MIN_VALID_YEAR = 2025

DEFAULT_LATITUDE = 6.791164
DEFAULT_LONGITUDE = 79.900497
DEFAULT_WIND_DIRECTION = "N"

# Shown when the store is unreachable or returns no valid readings
FALLBACK_READING = {
    "latitude" : DEFAULT_LATITUDE,
    "longitude" : DEFAULT_LONGITUDE,
    "temperature" : 30.0,
    "humidity" : 80.0,
    "voc" : 140.0,
    "pm1" : 0.0,
    "pm25" : 40.0,
    "pm10" : 0.0,
    "rainfall" : 0.0,
    "wind_speed" : 0.0,
    "wind_direction" : DEFAULT_WIND_DIRECTION,
    "co2" : 0.0,
    "device_id" : "",
}
