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
Track geometry for the flight map.

Turns a GPS track into path segments colored along a start→end gradient,
estimates the initial camera and renders the result as a pydeck Deck.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import pydeck as pdk

from .config import ViewerConfig
from .config_models import (
    RGB, AltitudeMarker, GeoTrackPoint, PathSegment, TrackGeometry, ViewportState
)
from .geo_math import track_bounds, track_center

logger = logging.getLogger(__name__)


def interpolate_color(start: RGB, end: RGB, t: float) -> RGB:
    """Linear RGB interpolation, t in [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(start, end))


def altitude_color(altitude: float, ramp: Optional[Sequence[Tuple[float, RGB]]] = None) -> RGB:
    """Color of an altitude on a piecewise-linear ramp of (meters, rgb) stops."""
    ramp = ramp or ViewerConfig.TRACK['altitude_ramp']
    if altitude <= ramp[0][0]:
        return tuple(ramp[0][1])
    for (lo, lo_color), (hi, hi_color) in zip(ramp, ramp[1:]):
        if altitude <= hi:
            return interpolate_color(lo_color, hi_color, (altitude - lo) / (hi - lo))
    return tuple(ramp[-1][1])


def estimate_zoom(track: Sequence[GeoTrackPoint]) -> float:
    """zoom = clamp(16 - log2(max_span_deg * 111), 10, 18) over the padded bounds."""
    cfg = ViewerConfig.TRACK
    bounds = track_bounds(track)
    if bounds is None:
        return cfg['zoom_max']
    (min_lng, min_lat), (max_lng, max_lat) = bounds
    max_span = max(max_lng - min_lng, max_lat - min_lat)
    zoom = cfg['zoom_base'] - math.log2(max_span * cfg['km_per_degree'])
    return max(cfg['zoom_min'], min(cfg['zoom_max'], zoom))


class TrackGeometryBuilder:
    """
    Builds colored path segments and the initial viewport from a track.

    Segment i of n is colored at t = i / (n - 1) along the gradient, so the
    first segment carries the start color and the last one the end color.
    """

    def __init__(self, gradient_start: Optional[RGB] = None, gradient_end: Optional[RGB] = None):
        self.gradient_start = tuple(gradient_start or ViewerConfig.TRACK['gradient_start'])
        self.gradient_end = tuple(gradient_end or ViewerConfig.TRACK['gradient_end'])

    def _usable_points(self, track: Sequence[GeoTrackPoint], is_3d: bool) -> List[GeoTrackPoint]:
        points = []
        for lng, lat, alt in track:
            if not (math.isfinite(lng) and math.isfinite(lat)):
                continue
            if not is_3d or not math.isfinite(alt):
                alt = 0.0
            points.append((lng, lat, alt))
        return points

    def build_segments(self, track: Sequence[GeoTrackPoint], is_3d: bool = True) -> List[PathSegment]:
        points = self._usable_points(track, is_3d)
        if len(points) < 2:
            return []
        count = len(points) - 1
        segments = []
        for i in range(count):
            t = i / (count - 1) if count > 1 else 0.0
            color = interpolate_color(self.gradient_start, self.gradient_end, t)
            segments.append(PathSegment(start=points[i], end=points[i + 1], color=color))
        return segments

    def build_viewport(self, track: Sequence[GeoTrackPoint], is_3d: bool = True) -> Optional[ViewportState]:
        if not track or track_bounds(track) is None:
            return None
        lng, lat = track_center(track)
        cfg = ViewerConfig.TRACK
        return ViewportState(
            longitude=lng,
            latitude=lat,
            zoom=estimate_zoom(track),
            pitch=cfg['pitch_3d'] if is_3d else cfg['pitch_2d'],
            bearing=0.0,
        )

    def build_altitude_markers(self, track: Sequence[GeoTrackPoint]) -> List[AltitudeMarker]:
        """Down-sampled track points colored by true altitude."""
        points = self._usable_points(track, is_3d=True)
        if not points:
            return []
        step = max(1, len(points) // ViewerConfig.TRACK['max_altitude_markers'])
        return [
            AltitudeMarker(longitude=lng, latitude=lat, altitude=alt, color=altitude_color(alt))
            for lng, lat, alt in points[::step]
        ]

    def build(self, track: Sequence[GeoTrackPoint], is_3d: bool = True) -> TrackGeometry:
        points = self._usable_points(track, is_3d)
        skipped = len(track) - len(points)
        if skipped:
            logger.warning(f"Skipped {skipped} track points without a usable position")
        if len(points) < 2:
            logger.info("Track has fewer than 2 usable points; no path will be drawn")
        return TrackGeometry(
            segments=self.build_segments(track, is_3d),
            viewport=self.build_viewport(track, is_3d),
            start_point=points[0] if points else None,
            end_point=points[-1] if points else None,
            altitude_markers=self.build_altitude_markers(track),
            is_3d=is_3d,
        )


def build_deck(geometry: TrackGeometry, theme: str = "dark") -> pdk.Deck:
    """
    Render a TrackGeometry as a pydeck Deck.

    Args:
        geometry: Output of TrackGeometryBuilder.build
        theme: Resolved theme, 'dark' or 'light'
    """
    cfg = ViewerConfig.TRACK
    layers = []
    if geometry.segments:
        layers.append(
            pdk.Layer(
                "PathLayer",
                data=[s.as_dict() for s in geometry.segments],
                get_path="path",
                get_color="color",
                width_min_pixels=3,
                pickable=False,
            )
        )
    if geometry.altitude_markers:
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=[
                    {"position": [m.longitude, m.latitude], "label": "", "altitude": round(m.altitude, 1),
                     "color": list(m.color)}
                    for m in geometry.altitude_markers
                ],
                get_position="position",
                get_fill_color="color",
                radius_min_pixels=3,
                opacity=0.8,
                pickable=True,
            )
        )
    markers = []
    if geometry.start_point is not None:
        markers.append({"position": list(geometry.start_point[:2]), "label": "Start",
                        "altitude": geometry.start_point[2],
                        "color": list(cfg['start_marker_color'])})
    if geometry.end_point is not None:
        markers.append({"position": list(geometry.end_point[:2]), "label": "End",
                        "altitude": geometry.end_point[2],
                        "color": list(cfg['end_marker_color'])})
    if markers:
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=markers,
                get_position="position",
                get_fill_color="color",
                get_line_color=[255, 255, 255],
                stroked=True,
                radius_min_pixels=7,
                line_width_min_pixels=2,
                pickable=True,
            )
        )

    viewport = geometry.viewport or ViewportState()
    return pdk.Deck(
        map_style=ViewerConfig.MAP_STYLES.get(theme, ViewerConfig.MAP_STYLES['dark']),
        initial_view_state=pdk.ViewState(**viewport.as_dict()),
        layers=layers,
        tooltip={"text": "{label} {altitude} m"},
    )
