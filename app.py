# Copyright (c) 2025 Martinolli
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import streamlit as st

from flightview.chart_manager import ChartPanelSet
from flightview.config_models import ZoomWindow
from flightview.error_handling import configure_logging, handle_errors
from flightview.flight_loader import FlightLoader
from flightview.flight_stats import FlightSummary, format_date_time
from flightview.performance_monitoring import PerformanceMonitor
from flightview.plotly_ui import panel_config
from flightview.theme import THEME_MODES, resolve_theme_mode
from flightview.track_geometry import TrackGeometryBuilder, build_deck
from flightview.unit_conversion import UnitSystem

configure_logging()

st.set_page_config(
    page_title="Flight Telemetry Viewer",
    page_icon="✈️",
    layout="wide",
    initial_sidebar_state="expanded"
)

if 'flight_data' not in st.session_state:
    st.session_state.flight_data = None

flight_loader = FlightLoader()
monitor = PerformanceMonitor()


@handle_errors("loading flight")
def load_flight(uploaded):
    return flight_loader.load(uploaded)


def _reset_zoom():
    st.session_state.pop('time_window', None)
    st.session_state.zoom_reset = True


def render_sidebar():
    st.sidebar.header("✈️ Flight")
    uploaded = st.sidebar.file_uploader("Flight bundle (JSON)", type=["json"])
    if uploaded is not None:
        data = load_flight(uploaded)
        if data is not None:
            st.session_state.flight_data = data

    st.sidebar.header("⚙️ Display")
    unit_system = st.sidebar.radio(
        "Units", [u.value for u in UnitSystem],
        format_func=str.capitalize, horizontal=True
    )
    theme_mode = st.sidebar.selectbox("Theme", THEME_MODES, format_func=str.capitalize)
    is_3d = st.sidebar.checkbox("3D track", value=True)
    return unit_system, theme_mode, is_3d


def render_stats(data, unit_system):
    flight = data.flight
    st.subheader(flight.display_name or flight.file_name or "Flight")
    details = [format_date_time(flight.start_time)]
    if flight.drone_model and not flight.drone_model.startswith('Unknown'):
        details.append(flight.drone_model)
    if flight.aircraft_name:
        details.append(f"Device: {flight.aircraft_name}")
    if flight.drone_serial:
        details.append(f"SN: {flight.drone_serial}")
    if flight.battery_serial:
        details.append(f"Battery SN: {flight.battery_serial}")
    st.caption(" · ".join(details))

    summary = FlightSummary.from_flight_data(data)
    labels = summary.labels(unit_system)
    cols = st.columns(len(labels))
    for col, (label, value) in zip(cols, labels.items()):
        col.metric(label, value)
    if summary.low_battery:
        st.warning(f"Battery dropped to {labels['Min Battery']}")
    if data.track and not summary.track_aligned:
        st.info("GPS track and telemetry have different sample counts; "
                "distance to home uses telemetry positions only.")


@handle_errors("rendering charts")
def render_charts(data, unit_system, theme_mode):
    panel_set = ChartPanelSet(
        data.telemetry,
        unit_system=unit_system,
        theme_mode=theme_mode,
        start_time=data.flight.start_time,
        track=data.track,
    )
    with monitor.measure_time("Build panels"):
        panels = panel_set.build_panels()
        panel_set.mount_all()

    time = panel_set.telemetry.time
    if len(time) > 1:
        t_min, t_max = float(time[0]), float(time[-1])
        col1, col2 = st.columns([5, 1])
        with col1:
            window = st.slider("Time window (s)", t_min, t_max, (t_min, t_max), key='time_window')
        with col2:
            st.button("Reset zoom", on_click=_reset_zoom, width="stretch")

        if st.session_state.pop('zoom_reset', False):
            panel_set.reset_zoom()
        elif window != (t_min, t_max):
            panel_set.on_zoom(panels[0].id, ZoomWindow(start_value=window[0], end_value=window[1]))
            panel_set.sync.end_tick()

    flight_name = data.flight.display_name or data.flight.file_name or "flight"
    for panel in panels:
        st.plotly_chart(
            panel_set.figure(panel.id),
            width="stretch",
            config=panel_config(flight_name, panel.id),
            key=f"chart_{panel.id}",
        )


@handle_errors("rendering map")
def render_map(data, theme_mode, is_3d):
    with monitor.measure_time("Build track"):
        geometry = TrackGeometryBuilder().build(data.track, is_3d=is_3d)
    if geometry.viewport is None:
        st.info("No GPS track for this flight.")
        return
    st.pydeck_chart(build_deck(geometry, resolve_theme_mode(theme_mode)))


def main():
    unit_system, theme_mode, is_3d = render_sidebar()
    data = st.session_state.flight_data
    if data is None:
        st.title("✈️ Flight Telemetry Viewer")
        st.info("Upload a flight bundle in the sidebar to get started.")
        return

    render_stats(data, unit_system)
    tab_charts, tab_map = st.tabs(["📈 Telemetry", "🗺️ Map"])
    with tab_charts:
        render_charts(data, unit_system, theme_mode)
    with tab_map:
        render_map(data, theme_mode, is_3d)
    monitor.display_metrics()


main()
