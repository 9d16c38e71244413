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
In-memory telemetry model for a single flight.

Channels are "present-with-gaps": a supplied channel is a float array of the
same length as `time` with NaN for a missing sample. A channel that was not
supplied at all is absent and `channel()` returns None for it.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config_models import GeoTrackPoint
from .error_handling import FlightDataError
from .unit_conversion import as_float_array

logger = logging.getLogger(__name__)

CHANNELS = (
    'height', 'vpsHeight', 'altitude', 'speed',
    'battery', 'batteryVoltage', 'batteryTemp',
    'satellites', 'rcSignal', 'rcUplink', 'rcDownlink',
    'pitch', 'roll', 'yaw',
    'velocityX', 'velocityY', 'velocityZ',
    'latitude', 'longitude',
)


@dataclass
class Flight:
    """Flight metadata as handed over by the storage layer."""
    id: int
    file_name: str = ""
    display_name: str = ""
    drone_model: Optional[str] = None
    drone_serial: Optional[str] = None
    aircraft_name: Optional[str] = None
    battery_serial: Optional[str] = None
    start_time: Optional[str] = None
    duration_secs: Optional[float] = None
    total_distance: Optional[float] = None
    max_altitude: Optional[float] = None
    max_speed: Optional[float] = None
    point_count: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Flight":
        return cls(
            id=d.get("id", 0),
            file_name=d.get("fileName", ""),
            display_name=d.get("displayName") or d.get("fileName", ""),
            drone_model=d.get("droneModel"),
            drone_serial=d.get("droneSerial"),
            aircraft_name=d.get("aircraftName"),
            battery_serial=d.get("batterySerial"),
            start_time=d.get("startTime"),
            duration_secs=d.get("durationSecs"),
            total_distance=d.get("totalDistance"),
            max_altitude=d.get("maxAltitude"),
            max_speed=d.get("maxSpeed"),
            point_count=d.get("pointCount"),
        )


@dataclass
class TelemetryData:
    """Parallel telemetry channels indexed by seconds from flight start."""
    time: np.ndarray
    channels: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        self.time = as_float_array(self.time)
        n = len(self.time)
        cleaned = {}
        for name, values in self.channels.items():
            if values is None:
                continue
            arr = as_float_array(values)
            if len(arr) == 0:
                continue
            if len(arr) != n:
                logger.warning(
                    f"Channel '{name}' has {len(arr)} samples but time has {n}; treating it as absent"
                )
                continue
            cleaned[name] = arr
        self.channels = cleaned

    def __len__(self) -> int:
        return len(self.time)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TelemetryData":
        if not isinstance(d, dict) or "time" not in d:
            raise FlightDataError("Telemetry bundle must be an object with a 'time' array")
        channels = {name: d[name] for name in CHANNELS if d.get(name) is not None}
        return cls(time=d["time"], channels=channels)

    def channel(self, name: str) -> Optional[np.ndarray]:
        """The channel array, or None when the channel was not supplied."""
        return self.channels.get(name)

    def values(self, name: str) -> np.ndarray:
        """The channel array, or an all-NaN array of length N when absent."""
        arr = self.channels.get(name)
        if arr is None:
            return np.full(len(self.time), np.nan)
        return arr

    def has_samples(self, name: str) -> bool:
        """True when the channel holds at least one sample."""
        arr = self.channels.get(name)
        return arr is not None and bool(np.isfinite(arr).any())

    def to_frame(self) -> pd.DataFrame:
        """Telemetry as a DataFrame with an 'Elapsed Time (s)' column."""
        df = pd.DataFrame({name: arr for name, arr in self.channels.items()})
        df.insert(0, "Elapsed Time (s)", self.time)
        return df


def parse_track(raw: Optional[Sequence[Sequence[Any]]]) -> List[GeoTrackPoint]:
    """
    Convert raw [lng, lat, alt] triples into tuples.

    Entries that are not at least [lng, lat] are skipped; a missing altitude
    becomes 0.
    """
    track = []
    for entry in raw or []:
        if entry is None or len(entry) < 2:
            continue
        lng, lat = entry[0], entry[1]
        alt = entry[2] if len(entry) > 2 else 0.0
        track.append((
            math.nan if lng is None else float(lng),
            math.nan if lat is None else float(lat),
            0.0 if alt is None else float(alt),
        ))
    return track


@dataclass
class FlightData:
    """Metadata, telemetry and GPS track of the selected flight."""
    flight: Flight
    telemetry: TelemetryData
    track: List[GeoTrackPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FlightData":
        if not isinstance(d, dict):
            raise FlightDataError("Flight bundle must be a JSON object")
        return cls(
            flight=Flight.from_dict(d.get("flight") or {}),
            telemetry=TelemetryData.from_dict(d.get("telemetry") or {}),
            track=parse_track(d.get("track")),
        )
