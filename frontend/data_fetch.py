#file: frontend/data_fetch.py

import os
import aiohttp
import logging
from dotenv import load_dotenv

load_dotenv()

FASTAPI_URL = os.getenv("FASTAPI_URL", "http://localhost:8000")

async def fetch_dashboard():
    """Fetch the dashboard snapshot from FastAPI asynchronously."""
    url = f"{FASTAPI_URL}/dashboard"
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.json()
    except aiohttp.ClientError as e:
        logging.error(f"Error fetching dashboard: {e}")
        return None

async def select_location(index):
    """Select the location group behind a map marker."""
    url = f"{FASTAPI_URL}/locations/{index}/select"
    async with aiohttp.ClientSession() as session:
        try:
            async with session.post(url) as response:
                response.raise_for_status()
                return await response.json()
        except aiohttp.ClientResponseError as e:
            logging.error(f"[ERROR] HTTP {e.status} selecting location {index}: {e.message}")
        except aiohttp.ClientError as e:
            logging.error(f"[ERROR] Network request failed: {e}")

    return None

async def clear_selection():
    """Clear the selected location so the global history is shown."""
    url = f"{FASTAPI_URL}/locations/selection"
    try:
        async with aiohttp.ClientSession() as session:
            async with session.delete(url) as response:
                response.raise_for_status()
                return await response.json()
    except aiohttp.ClientError as e:
        logging.error(f"Error clearing location selection: {e}")
        return None
