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
"""
ChartPanelSet: builds the telemetry chart panels of one flight, renders them
as Plotly figures and keeps their zoom windows in sync.

Panels, in display order: altitude & speed, battery, attitude, RC signal,
distance to home, velocity and GPS satellites. Every panel shares the
flight's time axis.
"""
# Import necessary libraries
import logging
from functools import partial
from typing import Dict, List, Optional, Sequence

import plotly.graph_objects as go

from .config import ViewerConfig
from .config_models import (
    AxisConfig, ChartSeries, DisplayRange, GeoTrackPoint, MarkArea, PanelConfig, ZoomWindow
)
from .range_estimator import compute_range
from .series_builder import SERIES_COLORS, SeriesBuilder
from .telemetry import TelemetryData
from .theme import PALETTES, resolve_theme_mode
from .tooltip_formatter import TooltipFormatter
from .unit_conversion import UnitSystem, parse_unit_system
from .viewport_sync import PlotlyFigureHandle, ViewportSyncController

logger = logging.getLogger(__name__)

PANEL_TITLES = {
    'altitude_speed': 'Altitude & Speed',
    'battery': 'Battery',
    'attitude': 'Attitude',
    'rc_signal': 'RC Signal',
    'distance_to_home': 'Distance to Home',
    'velocity': 'Velocity',
    'gps': 'GPS',
}

LOW_BATTERY_FILL = 'rgba(239, 68, 68, 0.12)'
TOOLTIP_TRACE_NAME = '_tooltip'


def _axis_key(index: int) -> str:
    return 'yaxis' if index == 0 else f'yaxis{index + 1}'


def _axis_ref(index: int) -> str:
    return 'y' if index == 0 else f'y{index + 1}'


class ChartPanelSet:
    """
    Orchestrates panel building, figure rendering and zoom sync.

    Args:
        telemetry: Telemetry of the selected flight
        unit_system: 'metric' or 'imperial'
        theme_mode: 'system', 'dark' or 'light'
        start_time: Flight start as an ISO-8601 string, for tooltip wall-clock time
        track: GPS track (distance-to-home fallback source)
        sync: Shared zoom controller; a private one is created when omitted

    Raises:
        InvalidConfigurationError: for an unknown unit system or theme mode
    """

    def __init__(self, telemetry: TelemetryData, unit_system=UnitSystem.METRIC,
                 theme_mode: str = 'system', start_time: Optional[str] = None,
                 track: Optional[Sequence[GeoTrackPoint]] = None,
                 sync: Optional[ViewportSyncController] = None,
                 system_preference: Optional[str] = None):
        self.telemetry = telemetry
        self.unit_system = parse_unit_system(unit_system)
        self.theme = resolve_theme_mode(theme_mode, system_preference)
        self.palette = PALETTES[self.theme]
        self.track = list(track or [])
        self.series_builder = SeriesBuilder(telemetry, self.unit_system, self.track)
        self.tooltip_formatter = TooltipFormatter(start_time, self.theme)
        self.sync = sync if sync is not None else ViewportSyncController()
        self._panels: Optional[Dict[str, PanelConfig]] = None
        self._figures: Dict[str, go.Figure] = {}
        self._handles: Dict[str, PlotlyFigureHandle] = {}

    # ------------------------------------------------------------------
    # Panel configuration
    # ------------------------------------------------------------------

    def _tooltip_at(self, time: List[float], series: List[ChartSeries], index: int) -> str:
        return self.tooltip_formatter.format_at(index, time, series).to_html(self.palette)

    def _panel(self, panel_id: str, series: List[ChartSeries], axes: List[AxisConfig],
               mark_areas: Optional[List[MarkArea]] = None) -> PanelConfig:
        time = [float(t) for t in self.telemetry.time]
        return PanelConfig(
            id=panel_id,
            title=PANEL_TITLES[panel_id],
            time=time,
            series=series,
            axes=axes,
            mark_areas=mark_areas or [],
            tooltip=partial(self._tooltip_at, time, series),
        )

    def _altitude_speed_panel(self, series: List[ChartSeries]) -> PanelConfig:
        height, vps, speed = series
        conv = self.series_builder.converter
        axes = [
            AxisConfig('Height', conv.length_unit, compute_range([height.data, vps.data]),
                       color=SERIES_COLORS['Height']),
            AxisConfig('Speed', conv.speed_unit, compute_range(speed.data),
                       color=SERIES_COLORS['Speed'], side='right'),
        ]
        return self._panel('altitude_speed', series, axes)

    def _battery_panel(self, series: List[ChartSeries]) -> PanelConfig:
        battery, temperature, voltage = series
        axes = [
            AxisConfig('Battery', '%', compute_range(battery.data, clamp_min=0, clamp_max=100),
                       color=SERIES_COLORS['Battery']),
            AxisConfig('Temperature', '°C', compute_range(temperature.data),
                       color=SERIES_COLORS['Temperature'], side='right'),
            AxisConfig('Voltage', 'V', compute_range(voltage.data),
                       color=SERIES_COLORS['Voltage'], side='right', visible=False),
        ]
        low = MarkArea(y_from=0.0, y_to=ViewerConfig.CHARTS['low_battery_percent'],
                       color=LOW_BATTERY_FILL, axis_index=0)
        return self._panel('battery', series, axes, [low])

    def _attitude_panel(self, series: List[ChartSeries]) -> PanelConfig:
        axes = [AxisConfig('Angle', '°', compute_range([s.data for s in series]))]
        return self._panel('attitude', series, axes)

    def _rc_signal_panel(self, series: List[ChartSeries]) -> PanelConfig:
        axes = [AxisConfig('Signal', '%', DisplayRange(0.0, 100.0),
                           color=series[0].color,
                           interval=ViewerConfig.CHARTS['rc_signal_interval'])]
        return self._panel('rc_signal', series, axes)

    def _distance_to_home_panel(self, series: List[ChartSeries]) -> PanelConfig:
        axes = [AxisConfig('Distance', self.series_builder.converter.length_unit,
                           compute_range(series[0].data, clamp_min=0),
                           color=SERIES_COLORS['Distance to Home'])]
        return self._panel('distance_to_home', series, axes)

    def _velocity_panel(self, series: List[ChartSeries]) -> PanelConfig:
        axes = [AxisConfig('Speed', self.series_builder.converter.speed_unit,
                           compute_range([s.data for s in series]))]
        return self._panel('velocity', series, axes)

    def _gps_panel(self, series: List[ChartSeries]) -> PanelConfig:
        axes = [AxisConfig('Satellites', '', compute_range(series[0].data, clamp_min=0),
                           color=SERIES_COLORS['Satellites'])]
        return self._panel('gps', series, axes)

    def build_panels(self) -> List[PanelConfig]:
        """Build every panel configuration from the current inputs."""
        builders = {
            'altitude_speed': self._altitude_speed_panel,
            'battery': self._battery_panel,
            'attitude': self._attitude_panel,
            'rc_signal': self._rc_signal_panel,
            'distance_to_home': self._distance_to_home_panel,
            'velocity': self._velocity_panel,
            'gps': self._gps_panel,
        }
        panels = [builders[panel_id](series)
                  for panel_id, series in self.series_builder.build_all().items()]
        self._panels = {p.id: p for p in panels}
        logger.debug(
            f"Built {len(panels)} panels over {len(self.telemetry)} samples "
            f"({self.unit_system.value}, {self.theme}, rc={self.series_builder.rc_mode})"
        )
        return panels

    def panel(self, panel_id: str) -> PanelConfig:
        if self._panels is None:
            self.build_panels()
        if panel_id not in self._panels:
            raise KeyError(f"Unknown panel '{panel_id}'; expected one of {list(PANEL_TITLES)}")
        return self._panels[panel_id]

    # ------------------------------------------------------------------
    # Plotly rendering
    # ------------------------------------------------------------------

    def _axis_layout(self, axis: AxisConfig, index: int) -> Dict:
        palette = self.palette
        layout = dict(
            title=dict(text=axis.title if axis.visible else None, font=dict(color=axis.color)),
            side=axis.side,
            visible=axis.visible,
            showgrid=index == 0,
            gridcolor=palette.split_line,
            linecolor=palette.axis_line,
            tickfont=dict(color=palette.axis_label),
            zeroline=False,
        )
        if not axis.range.is_empty:
            layout['range'] = [axis.range.min, axis.range.max]
        else:
            layout['autorange'] = True
        if axis.interval is not None:
            layout['dtick'] = axis.interval
        if index > 0:
            layout['overlaying'] = 'y'
        return layout

    def _tooltip_trace(self, panel: PanelConfig) -> go.Scatter:
        """Invisible trace carrying the full hover annotation per sample."""
        first = panel.axes[0].range if panel.axes else DisplayRange()
        anchor = first.min if first.min is not None else 0.0
        return go.Scatter(
            x=panel.time,
            y=[anchor] * len(panel.time),
            mode='markers',
            marker=dict(opacity=0, size=1),
            name=TOOLTIP_TRACE_NAME,
            showlegend=False,
            customdata=[panel.tooltip(i) for i in range(len(panel.time))],
            hovertemplate='%{customdata}<extra></extra>',
        )

    def create_figure(self, panel: PanelConfig) -> go.Figure:
        """
        Render a panel as a Plotly figure.

        One y axis per AxisConfig, series traces on their axis with gaps
        where data is missing, the hover annotation from the tooltip
        formatter and a range slider on the time axis.
        """
        fig = go.Figure()
        for s in panel.series:
            fig.add_trace(go.Scatter(
                x=panel.time,
                y=s.data,
                mode='lines',
                name=s.name,
                line=dict(color=s.color, width=s.line_width),
                fill='tozeroy' if s.area else None,
                connectgaps=False,
                visible=True if s.visible else 'legendonly',
                yaxis=_axis_ref(s.axis_index),
                hoverinfo='skip',
            ))
        if panel.tooltip is not None and panel.time:
            fig.add_trace(self._tooltip_trace(panel))

        for m in panel.mark_areas:
            fig.add_shape(
                type='rect', xref='paper', x0=0, x1=1,
                yref=_axis_ref(m.axis_index), y0=m.y_from, y1=m.y_to,
                fillcolor=m.color, line_width=0, layer='below',
            )

        palette = self.palette
        fig.update_layout(
            title=panel.title,
            template=palette.plotly_template,
            hovermode='x',
            hoverlabel=dict(
                bgcolor=palette.tooltip_background,
                bordercolor=palette.tooltip_border,
                font=dict(color=palette.tooltip_text),
            ),
            legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
            margin=dict(l=60, r=60, t=60, b=30),
            height=300,
            uirevision=panel.id,
        )
        fig.update_xaxes(
            title_text='Time (s)',
            gridcolor=palette.split_line,
            tickfont=dict(color=palette.axis_label),
            rangeslider=dict(visible=ViewerConfig.CHARTS['show_range_slider']),
        )
        fig.update_layout(**{_axis_key(i): self._axis_layout(a, i) for i, a in enumerate(panel.axes)})
        return fig

    # ------------------------------------------------------------------
    # Mounting and zoom
    # ------------------------------------------------------------------

    @property
    def mounted_ids(self) -> List[str]:
        return list(self._figures)

    def figure(self, panel_id: str) -> Optional[go.Figure]:
        return self._figures.get(panel_id)

    def mount(self, panel_id: str) -> go.Figure:
        """Create the panel's figure and register it for zoom sync (idempotent)."""
        if panel_id in self._figures:
            self.sync.register(panel_id, self._handles[panel_id])
            return self._figures[panel_id]
        panel = self.panel(panel_id)
        fig = self.create_figure(panel)
        handle = PlotlyFigureHandle(fig, panel.time)
        self._figures[panel_id] = fig
        self._handles[panel_id] = handle
        self.sync.register(panel_id, handle)
        return fig

    def mount_all(self) -> List[go.Figure]:
        if self._panels is None:
            self.build_panels()
        return [self.mount(panel_id) for panel_id in self._panels]

    def unmount(self, panel_id: str) -> bool:
        self._figures.pop(panel_id, None)
        self._handles.pop(panel_id, None)
        return self.sync.unregister(panel_id)

    def on_zoom(self, panel_id: str, window: Optional[ZoomWindow] = None) -> bool:
        """
        Forward a zoom on `panel_id` to the controller.

        Args:
            panel_id: Panel the user zoomed
            window: New window of that panel, applied to it before the
                broadcast when the host reports the zoom by value
        """
        handle = self._handles.get(panel_id)
        if window is not None and handle is not None and not self.sync.is_broadcasting:
            handle.set_zoom_window(window)
        return self.sync.on_zoom(panel_id)

    def reset_zoom(self) -> None:
        self.sync.reset_zoom()
