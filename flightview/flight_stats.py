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
Summary metrics shown above the charts: duration, distance, maximum height
and speed, minimum battery and the home location.

Values recorded in the flight metadata win; missing ones are derived from
the telemetry and track.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import ViewerConfig
from .config_models import GeoTrackPoint
from .geo_math import resolve_home, total_track_distance
from .telemetry import FlightData, TelemetryData
from .unit_conversion import UnitConverter, UnitSystem, format_duration

logger = logging.getLogger(__name__)


def check_track_alignment(telemetry: TelemetryData, track: Sequence[GeoTrackPoint]) -> bool:
    """True when track point i belongs to time sample i (equal lengths)."""
    return len(track) == len(telemetry)


def _nan_reduce(values: np.ndarray, func) -> Optional[float]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return None
    return float(func(finite))


def format_date_time(value: Optional[str]) -> str:
    """Start timestamp as e.g. 'May 01, 2024 10:15 AM'."""
    if not value:
        return 'Unknown date'
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return value
    return ts.strftime('%b %d, %Y %I:%M %p')


@dataclass
class FlightSummary:
    duration_secs: Optional[float] = None
    total_distance_m: Optional[float] = None
    max_altitude_m: Optional[float] = None
    max_speed_ms: Optional[float] = None
    min_battery: Optional[float] = None
    home: Optional[Tuple[float, float]] = None     # (lat, lon)
    point_count: int = 0
    track_aligned: bool = False

    @property
    def low_battery(self) -> bool:
        return self.min_battery is not None and self.min_battery < ViewerConfig.CHARTS['low_battery_percent']

    @classmethod
    def from_flight_data(cls, data: FlightData) -> "FlightSummary":
        flight, telemetry, track = data.flight, data.telemetry, data.track

        duration = flight.duration_secs
        if duration is None:
            duration = _nan_reduce(telemetry.time, np.max)

        distance = flight.total_distance
        if distance is None and len(track) > 1:
            distance = total_track_distance(track)

        max_altitude = flight.max_altitude
        if max_altitude is None:
            source = 'height' if telemetry.has_samples('height') else 'altitude'
            max_altitude = _nan_reduce(telemetry.values(source), np.max)

        max_speed = flight.max_speed
        if max_speed is None:
            max_speed = _nan_reduce(telemetry.values('speed'), np.max)

        home = None
        if telemetry.has_samples('latitude') and telemetry.has_samples('longitude'):
            home = resolve_home(telemetry.values('latitude'), telemetry.values('longitude'))
        elif track:
            home = resolve_home([p[1] for p in track], [p[0] for p in track])

        aligned = check_track_alignment(telemetry, track)
        if track and not aligned:
            logger.warning(
                f"Track has {len(track)} points but telemetry has {len(telemetry)} samples"
            )

        return cls(
            duration_secs=duration,
            total_distance_m=distance,
            max_altitude_m=max_altitude,
            max_speed_ms=max_speed,
            min_battery=_nan_reduce(telemetry.values('battery'), np.min),
            home=home,
            point_count=flight.point_count if flight.point_count is not None else len(telemetry),
            track_aligned=aligned,
        )

    def labels(self, unit_system=UnitSystem.METRIC) -> Dict[str, str]:
        """Display strings for the stats bar."""
        conv = UnitConverter(unit_system)
        if self.min_battery is None:
            battery = '--'
        else:
            battery = f"{self.min_battery:g}%"
        if self.home is None:
            home = '--'
        else:
            home = f"{self.home[0]:.5f}, {self.home[1]:.5f}"
        return {
            'Duration': format_duration(self.duration_secs),
            'Distance': conv.format_distance(self.total_distance_m),
            'Max Height': conv.format_altitude(self.max_altitude_m),
            'Max Speed': conv.format_speed(self.max_speed_ms),
            'Min Battery': battery,
            'Home': home,
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "duration_secs": self.duration_secs,
            "total_distance_m": self.total_distance_m,
            "max_altitude_m": self.max_altitude_m,
            "max_speed_ms": self.max_speed_ms,
            "min_battery": self.min_battery,
            "home": list(self.home) if self.home else None,
            "point_count": self.point_count,
            "track_aligned": self.track_aligned,
        }
