#file: frontend/app.py

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import asyncio
import streamlit as st

st.set_page_config(page_title="Air Aware", page_icon="🌍", layout="wide")

from frontend.data_fetch import clear_selection, fetch_dashboard, select_location
from frontend.utils import format_timestamp, history_to_frame, location_options, markers_to_frame
from frontend.ui_elements import display_air_quality_data, display_aqi_card, display_history, display_map, \
    display_pollutants, display_sensor_cards

REFRESH_SECONDS = 30

st.title("Air Aware")


def on_location_change() :
    """Forward the picked marker to the backend selection."""
    index = st.session_state["location"]
    if index is None :
        asyncio.run(clear_selection())
    else :
        asyncio.run(select_location(index))


@st.fragment(run_every = REFRESH_SECONDS)
def dashboard() :
    snapshot = asyncio.run(fetch_dashboard())
    if not snapshot :
        st.warning("Air quality service unavailable.")
        return
    if snapshot["loading"] or not snapshot["current"] :
        st.info("Loading...")
        return

    current = snapshot["current"]
    reading = current["reading"]
    if current["is_fallback"] :
        st.warning("No live readings available, showing sample data.")

    home, insights = st.tabs(["Home", "Insights"])

    with home :
        col1, col2 = st.columns([2, 1])
        with col1 :
            marker_df = markers_to_frame(snapshot["markers"])
            if not marker_df.empty :
                display_map(marker_df, (reading["latitude"], reading["longitude"]))
            else :
                st.info("No sensor locations to show.")
        with col2 :
            st.subheader("Current Location")
            st.write(f"Lat: {reading['latitude']}  \nLng: {reading['longitude']}")
            st.subheader("Air Quality Data")
            display_air_quality_data(reading)
            st.caption(f"Last Updated: {format_timestamp(reading['valid_timestamp'])}")

            options = location_options(snapshot["markers"])
            st.selectbox("Location history", [None] + list(options), key = "location",
                         format_func = lambda index : "All locations" if index is None else options[index],
                         on_change = on_location_change)

        display_history(history_to_frame(snapshot["history"]), snapshot["selected_location_group"])

    with insights :
        display_aqi_card(current)
        display_sensor_cards(reading)
        display_pollutants(reading)


dashboard()
