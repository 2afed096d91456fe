#file: frontend/ui_elements.py

import streamlit as st
import plotly.express as px

AQI_COLORS = {"good" : "#00e400", "moderate" : "#ffff00", "unhealthy-sensitive" : "#ff7e00", "unhealthy" : "#ff0000",
    "very-unhealthy" : "#8f3f97", "severe" : "#7e0023", "hazardous" : "#7e0023"}


def display_map(marker_df, center) :
    """Display a map with one marker per recently active location."""
    if "size" not in marker_df.columns :
        marker_df["size"] = 12

    fig_map = px.scatter_mapbox(
        marker_df,
        lat = "lat",
        lon = "lon",
        hover_name = "name",
        hover_data = {"aqi" : True, "temperature" : True, "humidity" : True, "voc" : True, "pm25" : True,
            "pm10" : True, "pm1" : True, "updated" : True, "lat" : False, "lon" : False, "size" : False,
            "marker" : False},
        size = "size",
        color = "marker",
        color_discrete_map = {"Latest" : "blue", "Earlier" : "orange"},
        center = {"lat" : center[0], "lon" : center[1]},
        zoom = 15,
        height = 500,
        title = "Sensor Locations"
    )
    fig_map.update_layout(
        mapbox_style = "open-street-map",
        margin = {
            "r" : 0,
            "t" : 30,
            "l" : 0,
            "b" : 0
        }
    )

    st.plotly_chart(fig_map)

def display_air_quality_data(reading) :
    """Display the measurements of a single reading."""
    st.markdown(f"**Temperature:** {reading['temperature']}°C  \n"
                f"**Humidity:** {reading['humidity']}%  \n"
                f"**VOC:** {reading['voc']} ppb  \n"
                f"**PM2.5:** {reading['pm25']} μg/m³  \n"
                f"**PM10:** {reading['pm10']} μg/m³  \n"
                f"**PM1:** {reading['pm1']} μg/m³")

def display_aqi_card(current) :
    """Display the live AQI with its status, band and advice."""
    aqi = current["aqi"]
    color = AQI_COLORS.get(aqi["range_class"], "#000000")

    st.subheader("Air Quality Index")
    col1, col2 = st.columns(2)
    with col1 :
        st.metric("Live AQI", aqi["score"])
    with col2 :
        st.metric("Temperature", f"{current['reading']['temperature']}°C")
        st.write(f"Status: {aqi['category']}")
    st.markdown(f"<span style='color:{color}; font-weight:bold'>{aqi['range_label']}</span>", unsafe_allow_html = True)
    st.write(aqi["advisory"])

def display_sensor_cards(reading) :
    """Display the current environmental readings side by side."""
    st.subheader("Current Sensor Readings")
    cards = [("Temperature", f"{reading['temperature']}°C"), ("Humidity", f"{reading['humidity']}%"),
        ("Rainfall", f"{reading['rainfall']}mm"), ("Wind Speed", f"{reading['wind_speed']}m/s"),
        ("Wind Direction", reading["wind_direction"])]
    for column, (label, value) in zip(st.columns(len(cards)), cards) :
        with column :
            st.metric(label, value)

def display_pollutants(reading) :
    """Display the VOC and particulate matter panels."""
    st.subheader("Volatile Organic Compounds (VOC)")
    st.metric("VOC", f"{reading['voc']} ppb")
    st.caption("VOC concentrations should remain below 500 ppb indoors, with levels below 200 ppb being optimal "
               "for sensitive individuals.")

    st.subheader("Particulate Matter (PM 2.5, PM 10)")
    col1, col2, col3 = st.columns(3)
    with col1 :
        st.metric("PM1.0", f"{reading['pm1']}μg/m³")
    with col2 :
        st.metric("PM2.5", f"{reading['pm25']}μg/m³")
    with col3 :
        st.metric("PM10", f"{reading['pm10']}μg/m³")
    st.caption("For healthy air, PM2.5 should stay below 12 µg/m³ and PM10 below 50 µg/m³ (24-hour averages).")

def display_history(history_df, selected_group = None) :
    """Display the history panel, collapsed by default."""
    with st.expander("History", expanded = False) :
        if history_df.empty :
            st.info("No historical data available")
        else :
            st.dataframe(history_df, hide_index = True)
        if selected_group :
            st.caption(f"Showing history for location: {selected_group['latitude']:.4f}, "
                       f"{selected_group['longitude']:.4f}")
