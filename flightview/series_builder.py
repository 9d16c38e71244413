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
SeriesBuilder: turns raw telemetry channels into the named, unit-converted
series drawn on each chart panel.

Every series has exactly one value per time sample. A channel that is
missing altogether becomes an all-null series rather than a shorter one.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import ViewerConfig
from .config_models import ChartSeries, GeoTrackPoint
from .flight_stats import check_track_alignment
from .geo_math import distance_to_home
from .telemetry import TelemetryData
from .unit_conversion import UnitConverter, UnitSystem, to_nullable_list

logger = logging.getLogger(__name__)

# Line colors per series
SERIES_COLORS = {
    'Height': '#00A0DC',
    'VPS Height': '#f97316',
    'Speed': '#00D4AA',
    'Battery': '#f59e0b',
    'Voltage': '#38bdf8',
    'Temperature': '#a855f7',
    'Pitch': '#8b5cf6',
    'Roll': '#ec4899',
    'Yaw': '#14b8a6',
    'RC Signal': '#22c55e',
    'RC Uplink': '#22c55e',
    'RC Downlink': '#38bdf8',
    'Distance to Home': '#22c55e',
    'X Speed': '#f59e0b',
    'Y Speed': '#ec4899',
    'Z Speed': '#38bdf8',
    'Satellites': '#0ea5e9',
}

RC_COMBINED = 'combined'
RC_SPLIT = 'split'


class SeriesBuilder:
    """
    Builds the series of every chart panel for one flight.

    Args:
        telemetry: Telemetry of the selected flight
        unit_system: 'metric' or 'imperial'
        track: GPS track, used for distance to home only when the telemetry
            has no latitude/longitude channels
    """

    def __init__(self, telemetry: TelemetryData, unit_system=UnitSystem.METRIC,
                 track: Optional[Sequence[GeoTrackPoint]] = None):
        self.telemetry = telemetry
        self.converter = UnitConverter(unit_system)
        self.track = list(track or [])
        # Decided once per build so every panel agrees
        self.rc_mode = self._select_rc_mode()

    def __len__(self) -> int:
        return len(self.telemetry)

    def _select_rc_mode(self) -> str:
        if self.telemetry.has_samples('rcUplink') or self.telemetry.has_samples('rcDownlink'):
            return RC_SPLIT
        return RC_COMBINED

    def _series(self, name: str, values: np.ndarray, unit: str = "", axis_index: int = 0,
                visible: bool = True, area: bool = False, primary: bool = False) -> ChartSeries:
        line_width = ViewerConfig.CHARTS['primary_line_width' if primary else 'line_width']
        return ChartSeries(
            name=name,
            data=to_nullable_list(values),
            color=SERIES_COLORS[name],
            unit=unit,
            visible=visible,
            axis_index=axis_index,
            area=area,
            line_width=line_width,
        )

    # ------------------------------------------------------------------
    # Channel selection
    # ------------------------------------------------------------------

    def height_values(self) -> np.ndarray:
        """
        Height above takeoff in meters.

        Falls back to the barometric altitude channel as a whole when the
        height channel has no sample at all. The two are never blended.
        """
        if self.telemetry.has_samples('height'):
            return self.telemetry.values('height')
        if self.telemetry.has_samples('altitude'):
            logger.info("Height channel is empty; using altitude instead")
            return self.telemetry.values('altitude')
        return self.telemetry.values('height')

    def distance_to_home_values(self) -> np.ndarray:
        """
        Distance from the home point in meters.

        Uses the telemetry latitude/longitude channels. Without them the
        track is used, but only when it is index-aligned with the time axis.
        """
        n = len(self.telemetry)
        if self.telemetry.has_samples('latitude') and self.telemetry.has_samples('longitude'):
            return distance_to_home(self.telemetry.values('latitude'), self.telemetry.values('longitude'), n)
        if self.track:
            if check_track_alignment(self.telemetry, self.track):
                return distance_to_home([p[1] for p in self.track], [p[0] for p in self.track], n)
            logger.warning(
                f"Track has {len(self.track)} points but telemetry has {n} samples; "
                "distance to home is unavailable"
            )
        return np.full(n, np.nan)

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------

    def altitude_speed(self) -> List[ChartSeries]:
        conv = self.converter
        return [
            self._series('Height', conv.length(self.height_values()), conv.length_unit,
                         area=True, primary=True),
            self._series('VPS Height', conv.length(self.telemetry.values('vpsHeight')), conv.length_unit),
            self._series('Speed', conv.speed(self.telemetry.values('speed')), conv.speed_unit,
                         axis_index=1),
        ]

    def battery(self) -> List[ChartSeries]:
        return [
            self._series('Battery', self.telemetry.values('battery'), '%', area=True, primary=True),
            self._series('Temperature', self.telemetry.values('batteryTemp'), '°C', axis_index=1),
            self._series('Voltage', self.telemetry.values('batteryVoltage'), 'V', axis_index=2),
        ]

    def attitude(self) -> List[ChartSeries]:
        return [
            self._series('Pitch', self.telemetry.values('pitch'), '°'),
            self._series('Roll', self.telemetry.values('roll'), '°'),
            self._series('Yaw', self.telemetry.values('yaw'), '°'),
        ]

    def rc_signal(self) -> List[ChartSeries]:
        if self.rc_mode == RC_COMBINED:
            return [self._series('RC Signal', self.telemetry.values('rcSignal'), '%', area=True)]
        return [
            self._series('RC Uplink', self.telemetry.values('rcUplink'), '%'),
            self._series('RC Downlink', self.telemetry.values('rcDownlink'), '%'),
        ]

    def distance_to_home(self) -> List[ChartSeries]:
        conv = self.converter
        return [
            self._series('Distance to Home', conv.length(self.distance_to_home_values()),
                         conv.length_unit, area=True, primary=True),
        ]

    def velocity(self) -> List[ChartSeries]:
        conv = self.converter
        return [
            self._series('X Speed', conv.speed(self.telemetry.values('velocityX')), conv.speed_unit),
            self._series('Y Speed', conv.speed(self.telemetry.values('velocityY')), conv.speed_unit),
            self._series('Z Speed', conv.speed(self.telemetry.values('velocityZ')), conv.speed_unit),
        ]

    def gps(self) -> List[ChartSeries]:
        return [self._series('Satellites', self.telemetry.values('satellites'), primary=True)]

    def build_all(self) -> Dict[str, List[ChartSeries]]:
        """Series of every panel keyed by panel id, in display order."""
        return {
            'altitude_speed': self.altitude_speed(),
            'battery': self.battery(),
            'attitude': self.attitude(),
            'rc_signal': self.rc_signal(),
            'distance_to_home': self.distance_to_home(),
            'velocity': self.velocity(),
            'gps': self.gps(),
        }
