# Flight Telemetry Viewer core package

from .chart_manager import ChartPanelSet
from .config import ViewerConfig
from .config_models import (
    AxisConfig, ChartSeries, DisplayRange, PanelConfig, PathSegment,
    TrackGeometry, ViewportState, ZoomWindow
)
from .error_handling import FlightDataError, FlightViewError, InvalidConfigurationError
from .flight_loader import FlightLoader
from .flight_stats import FlightSummary, check_track_alignment
from .geo_math import distance_to_home, haversine_distance, resolve_home
from .range_estimator import compute_range
from .series_builder import SeriesBuilder
from .telemetry import Flight, FlightData, TelemetryData
from .tooltip_formatter import TooltipFormatter
from .track_geometry import TrackGeometryBuilder, build_deck
from .unit_conversion import UnitConverter, UnitSystem
from .viewport_sync import PlotlyFigureHandle, ViewportSyncController

__all__ = [
    'ChartPanelSet',
    'ViewerConfig',
    'AxisConfig',
    'ChartSeries',
    'DisplayRange',
    'PanelConfig',
    'PathSegment',
    'TrackGeometry',
    'ViewportState',
    'ZoomWindow',
    'FlightDataError',
    'FlightViewError',
    'InvalidConfigurationError',
    'FlightLoader',
    'FlightSummary',
    'check_track_alignment',
    'distance_to_home',
    'haversine_distance',
    'resolve_home',
    'compute_range',
    'SeriesBuilder',
    'Flight',
    'FlightData',
    'TelemetryData',
    'TooltipFormatter',
    'TrackGeometryBuilder',
    'build_deck',
    'UnitConverter',
    'UnitSystem',
    'PlotlyFigureHandle',
    'ViewportSyncController'
]
