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
Configuration models for chart panels and the track map.

This module defines the data classes exchanged between the series/geometry
builders and the rendering surfaces: axis bounds, chart series, panel
configurations, map path segments and camera state."""

# Standard Library Imports
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

CURRENT_SCHEMA_VERSION = 1

RGB = Tuple[int, int, int]
GeoTrackPoint = Tuple[float, float, float]   # (lng, lat, alt_m)


@dataclass(frozen=True)
class DisplayRange:
    """Axis bounds; a missing bound means the renderer auto-scales."""
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    def as_dict(self) -> Dict[str, float]:
        result = {}
        if self.min is not None:
            result["min"] = self.min
        if self.max is not None:
            result["max"] = self.max
        return result


@dataclass
class ChartSeries:
    """One named line on a panel. `data` holds floats with None gaps."""
    name: str
    data: List[Optional[float]]
    color: str
    unit: str = ""
    visible: bool = True
    axis_index: int = 0
    area: bool = False
    line_width: float = 1.5

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "data": list(self.data),
            "color": self.color,
            "unit": self.unit,
            "visible": self.visible,
            "axis_index": self.axis_index,
            "area": self.area,
            "line_width": self.line_width,
        }


@dataclass
class AxisConfig:
    """A value axis of a panel."""
    name: str
    unit: str = ""
    range: DisplayRange = field(default_factory=DisplayRange)
    color: str = "#9ca3af"
    side: str = "left"                  # left | right
    visible: bool = True
    interval: Optional[float] = None

    @property
    def title(self) -> str:
        return f"{self.name} ({self.unit})" if self.unit else self.name

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "unit": self.unit,
            "title": self.title,
            "range": self.range.as_dict(),
            "color": self.color,
            "side": self.side,
            "visible": self.visible,
            "interval": self.interval,
        }


@dataclass
class MarkArea:
    """A shaded horizontal band, e.g. the low-battery zone."""
    y_from: float
    y_to: float
    color: str
    axis_index: int = 0


@dataclass
class PanelConfig:
    """
    Canonical configuration of one chart panel: the shared time axis, the
    series drawn on it, their value axes and the hover formatter.
    """
    id: str
    title: str
    time: List[float]
    series: List[ChartSeries] = field(default_factory=list)
    axes: List[AxisConfig] = field(default_factory=list)
    mark_areas: List[MarkArea] = field(default_factory=list)
    tooltip: Optional[Callable[[int], str]] = None

    @property
    def legend(self) -> List[str]:
        return [s.name for s in self.series]

    def as_dict(self) -> Dict[str, Any]:
        """
        Convert PanelConfig to a dictionary for storage or transmission.
        The tooltip callable is not serialized.
        """
        return {
            "id": self.id,
            "title": self.title,
            "time": list(self.time),
            "series": [s.as_dict() for s in self.series],
            "axes": [a.as_dict() for a in self.axes],
            "legend": self.legend,
            "mark_areas": [
                {"y_from": m.y_from, "y_to": m.y_to, "color": m.color, "axis_index": m.axis_index}
                for m in self.mark_areas
            ],
            "schema_version": CURRENT_SCHEMA_VERSION
        }


@dataclass(frozen=True)
class ZoomWindow:
    """
    Visible sub-range of a panel's time axis.

    start/end are percentages of the full axis; start_value/end_value are
    explicit time values in seconds and win over the percentages when set.
    """
    start: Optional[float] = 0.0
    end: Optional[float] = 100.0
    start_value: Optional[float] = None
    end_value: Optional[float] = None

    @classmethod
    def full(cls) -> "ZoomWindow":
        return cls(start=0.0, end=100.0)


@dataclass
class ViewportState:
    """Camera over the geospatial track."""
    longitude: float = 0.0
    latitude: float = 0.0
    zoom: float = 14.0
    pitch: float = 45.0
    bearing: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "longitude": self.longitude,
            "latitude": self.latitude,
            "zoom": self.zoom,
            "pitch": self.pitch,
            "bearing": self.bearing,
        }


@dataclass(frozen=True)
class PathSegment:
    """One colored piece of the flight path between consecutive track points."""
    start: GeoTrackPoint
    end: GeoTrackPoint
    color: RGB

    def as_dict(self) -> Dict[str, Any]:
        return {"path": [list(self.start), list(self.end)], "color": list(self.color)}


@dataclass
class AltitudeMarker:
    longitude: float
    latitude: float
    altitude: float
    color: RGB


@dataclass
class TrackGeometry:
    """Everything the map surface needs for one flight."""
    segments: List[PathSegment] = field(default_factory=list)
    viewport: Optional[ViewportState] = None
    start_point: Optional[GeoTrackPoint] = None
    end_point: Optional[GeoTrackPoint] = None
    altitude_markers: List[AltitudeMarker] = field(default_factory=list)
    is_3d: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.segments
