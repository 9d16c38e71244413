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
Great-circle distance and home-point utilities over a GPS track.
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .config import ViewerConfig
from .config_models import GeoTrackPoint
from .unit_conversion import as_float_array

EARTH_RADIUS_M = 6371000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def resolve_home(latitudes: Sequence[Any], longitudes: Sequence[Any]) -> Optional[Tuple[float, float]]:
    """
    First (lat, lon) pair where both coordinates are finite.

    Returns:
        The home point, or None when no sample has a usable position.
    """
    lats = as_float_array(latitudes)
    lons = as_float_array(longitudes)
    n = min(len(lats), len(lons))
    valid = np.isfinite(lats[:n]) & np.isfinite(lons[:n])
    if not valid.any():
        return None
    idx = int(np.argmax(valid))
    return float(lats[idx]), float(lons[idx])


def distance_to_home(latitudes: Sequence[Any], longitudes: Sequence[Any],
                     length: Optional[int] = None) -> np.ndarray:
    """
    Distance in meters from the home point for every sample.

    Args:
        latitudes: Nullable latitude samples in degrees
        longitudes: Nullable longitude samples in degrees
        length: Output length; defaults to the number of latitude samples

    Returns:
        Float array with NaN where the sample has no position, or all NaN
        when no home point exists.
    """
    lats = as_float_array(latitudes)
    lons = as_float_array(longitudes)
    if length is None:
        length = len(lats)
    out = np.full(length, np.nan)

    home = resolve_home(lats, lons)
    if home is None:
        return out

    n = min(length, len(lats), len(lons))
    lat = lats[:n]
    lon = lons[:n]
    valid = np.isfinite(lat) & np.isfinite(lon)

    # Vectorized haversine over the valid samples
    home_lat, home_lon = np.radians(home[0]), np.radians(home[1])
    phi = np.radians(lat[valid])
    d_phi = phi - home_lat
    d_lambda = np.radians(lon[valid]) - home_lon
    a = np.sin(d_phi / 2) ** 2 + np.cos(home_lat) * np.cos(phi) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    out[:n][valid] = 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return out


def _finite_points(track: Sequence[GeoTrackPoint]) -> List[GeoTrackPoint]:
    return [p for p in track if math.isfinite(p[0]) and math.isfinite(p[1])]


def track_center(track: Sequence[GeoTrackPoint]) -> Tuple[float, float]:
    """Mean (lng, lat) of the track; (0, 0) for an empty track."""
    points = _finite_points(track)
    if not points:
        return 0.0, 0.0
    lngs = [p[0] for p in points]
    lats = [p[1] for p in points]
    return sum(lngs) / len(lngs), sum(lats) / len(lats)


def track_bounds(track: Sequence[GeoTrackPoint]) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """
    Padded bounding box ((min_lng, min_lat), (max_lng, max_lat)).

    Each side is padded by 10% of the span, at least 0.001 degrees.
    """
    points = _finite_points(track)
    if not points:
        return None
    cfg = ViewerConfig.TRACK
    lngs = [p[0] for p in points]
    lats = [p[1] for p in points]
    min_lng, max_lng = min(lngs), max(lngs)
    min_lat, max_lat = min(lats), max(lats)
    lng_pad = max((max_lng - min_lng) * cfg['bounds_padding_ratio'], cfg['bounds_min_padding_deg'])
    lat_pad = max((max_lat - min_lat) * cfg['bounds_padding_ratio'], cfg['bounds_min_padding_deg'])
    return (
        (min_lng - lng_pad, min_lat - lat_pad),
        (max_lng + lng_pad, max_lat + lat_pad),
    )


def total_track_distance(track: Sequence[GeoTrackPoint]) -> float:
    """Sum of great-circle distances between consecutive usable points, in meters."""
    points = _finite_points(track)
    return sum(
        haversine_distance(a[1], a[0], b[1], b[0])
        for a, b in zip(points, points[1:])
    )
