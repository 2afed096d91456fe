# file: backend/main.py

import logging
import uvicorn
from fastapi import FastAPI, Query, HTTPException, Request
from contextlib import asynccontextmanager
from typing import List

from backend.aqi import calculate_aqi, evaluate_aqi
from backend.dashboard import DashboardController
from backend.models import AqiResult, CurrentReading, DashboardSnapshot, DashboardState, LocationMarker, Reading
from backend.proximity import build_location_markers
from backend.state import history_view
from backend.store import ReadingStore, create_store

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def current_reading(state: DashboardState) -> CurrentReading | None :
    if state.current is None :
        return None
    return CurrentReading(reading = state.current, aqi = evaluate_aqi(state.current.aqi),
                          is_fallback = state.current_is_fallback)


def snapshot(state: DashboardState) -> DashboardSnapshot :
    """Flatten the controller state into what the frontend renders."""
    return DashboardSnapshot(
        loading = state.loading,
        current = current_reading(state),
        history = history_view(state),
        markers = build_location_markers(state.location_groups),
        selected_index = state.selected_index,
        selected_location_group = state.selected_location_group
    )


def create_app(store: ReadingStore | None = None) -> FastAPI :

    @asynccontextmanager
    async def lifespan(app: FastAPI) :
        """Start the dashboard controller on startup and tear it down on shutdown."""
        controller = DashboardController(store or create_store())
        app.state.controller = controller
        await controller.start()
        yield
        await controller.stop()

    app = FastAPI(
        title = "Air Aware",
        description = "Live air quality readings, AQI and location history from the sensor network.",
        version = "0.1",
        lifespan = lifespan
    )

    def get_controller(request: Request) -> DashboardController :
        return request.app.state.controller

    @app.get("/dashboard", response_model=DashboardSnapshot)
    async def dashboard(request: Request):
        """Everything the dashboard renders in one snapshot."""
        return snapshot(get_controller(request).state)

    @app.get("/current", response_model=CurrentReading | None)
    async def current(request: Request):
        """Most recent valid reading with its AQI."""
        return current_reading(get_controller(request).state)

    @app.get("/history", response_model=List[Reading])
    async def history(request: Request):
        """Recent readings for the history panel."""
        return history_view(get_controller(request).state)

    @app.get("/locations", response_model=List[LocationMarker])
    async def locations(request: Request):
        """One marker per recently active location."""
        return build_location_markers(get_controller(request).state.location_groups)

    @app.post("/locations/{index}/select", response_model=DashboardSnapshot)
    async def select_location(index: int, request: Request):
        """Show the history of the location behind a map marker."""
        try :
            state = get_controller(request).select_location_group(index)
        except IndexError as e :
            raise HTTPException(status_code = 404, detail = str(e))
        logging.info(f"Selected location group {index}")
        return snapshot(state)

    @app.delete("/locations/selection", response_model=DashboardSnapshot)
    async def clear_location_selection(request: Request):
        """Go back to the global history."""
        return snapshot(get_controller(request).clear_selection())

    @app.get("/aqi", response_model=AqiResult)
    async def aqi(
        pm25: float = Query(..., ge=0, description="PM2.5 concentration (µg/m³)"),
        pm1: float = Query(0, ge=0, description="PM1 concentration (µg/m³)"),
        pm10: float = Query(0, ge=0, description="PM10 concentration (µg/m³)")
    ):
        """AQI score and category for raw concentrations."""
        return evaluate_aqi(calculate_aqi(pm1, pm25, pm10))

    return app


app = create_app()

if __name__ == "__main__" :
    uvicorn.run(app, host = "0.0.0.0", port = 8000, log_level="info")
