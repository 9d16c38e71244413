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
Display unit conversion for SI telemetry values.

Telemetry arrives in SI units (meters, meters per second). The viewer shows
it either in metric (m, km/h) or imperial (ft, mph, mi) units.
"""

from enum import Enum
from typing import Any, Optional, Sequence, Union

import numpy as np

from .error_handling import InvalidConfigurationError

Numeric = Union[float, int, None]


class UnitSystem(str, Enum):
    METRIC = 'metric'
    IMPERIAL = 'imperial'


def parse_unit_system(value: Union[str, UnitSystem]) -> UnitSystem:
    """
    Validate a unit system value.

    Raises:
        InvalidConfigurationError: if the value is not a known unit system
    """
    if isinstance(value, UnitSystem):
        return value
    try:
        return UnitSystem(str(value).lower())
    except ValueError:
        raise InvalidConfigurationError(
            f"Unknown unit system {value!r}; expected one of "
            f"{[u.value for u in UnitSystem]}"
        ) from None


def to_nullable_list(values: Any) -> list:
    """Convert an array with NaN gaps into a list of floats with None gaps."""
    arr = np.asarray(values, dtype=float)
    return [float(v) if np.isfinite(v) else None for v in arr]


def as_float_array(values: Optional[Sequence[Numeric]]) -> np.ndarray:
    """Convert a nullable sequence into a float array, None becoming NaN."""
    if values is None:
        return np.array([], dtype=float)
    if isinstance(values, np.ndarray) and values.dtype != object:
        return values.astype(float)
    return np.array([np.nan if v is None else v for v in values], dtype=float)


class UnitConverter:
    """
    Maps SI telemetry values to the selected display unit system.

    Scalars keep their type (None stays None); sequences and arrays come
    back as float arrays with NaN where a sample is missing.
    """

    # Conversion factors from SI to display units
    CONVERSION_FACTORS = {
        'm->ft': 3.28084,
        'm/s->mph': 2.236936,
        'm/s->km/h': 3.6,
        'm->mi': 1.0 / 1609.344,
    }

    UNIT_LABELS = {
        UnitSystem.METRIC: {'length': 'm', 'speed': 'km/h', 'distance': 'm'},
        UnitSystem.IMPERIAL: {'length': 'ft', 'speed': 'mph', 'distance': 'mi'},
    }

    def __init__(self, unit_system: Union[str, UnitSystem] = UnitSystem.METRIC):
        self.unit_system = parse_unit_system(unit_system)

    @property
    def is_imperial(self) -> bool:
        return self.unit_system is UnitSystem.IMPERIAL

    @property
    def length_unit(self) -> str:
        return self.UNIT_LABELS[self.unit_system]['length']

    @property
    def speed_unit(self) -> str:
        return self.UNIT_LABELS[self.unit_system]['speed']

    @property
    def distance_unit(self) -> str:
        return self.UNIT_LABELS[self.unit_system]['distance']

    def _factor(self, quantity: str) -> float:
        if quantity == 'length':
            return self.CONVERSION_FACTORS['m->ft'] if self.is_imperial else 1.0
        if quantity == 'speed':
            return self.CONVERSION_FACTORS['m/s->mph'] if self.is_imperial else self.CONVERSION_FACTORS['m/s->km/h']
        if quantity == 'distance':
            return self.CONVERSION_FACTORS['m->mi'] if self.is_imperial else 1.0
        raise InvalidConfigurationError(f"Unknown quantity {quantity!r}")

    def _apply(self, value: Any, factor: float, inverse: bool = False) -> Any:
        if value is None:
            return None
        if np.isscalar(value):
            value = float(value)
            if not np.isfinite(value):
                return value
            return value / factor if inverse else value * factor
        arr = as_float_array(value)
        return arr / factor if inverse else arr * factor

    def length(self, value: Any) -> Any:
        """Height/altitude/distance-to-home in meters to display length."""
        return self._apply(value, self._factor('length'))

    def speed(self, value: Any) -> Any:
        """Speed in m/s to km/h (metric) or mph (imperial)."""
        return self._apply(value, self._factor('speed'))

    def distance(self, value: Any) -> Any:
        """Aggregate distance totals in meters to m (metric) or miles (imperial)."""
        return self._apply(value, self._factor('distance'))

    def length_to_metric(self, value: Any) -> Any:
        return self._apply(value, self._factor('length'), inverse=True)

    def speed_to_metric(self, value: Any) -> Any:
        return self._apply(value, self._factor('speed'), inverse=True)

    def distance_to_metric(self, value: Any) -> Any:
        return self._apply(value, self._factor('distance'), inverse=True)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def format_altitude(self, meters: Numeric) -> str:
        if not _is_number(meters):
            return '--'
        return f"{self.length(meters):.1f} {self.length_unit}"

    def format_speed(self, ms: Numeric) -> str:
        if not _is_number(ms):
            return '--'
        return f"{self.speed(ms):.1f} {self.speed_unit}"

    def format_distance(self, meters: Numeric) -> str:
        if not _is_number(meters):
            return '--'
        if self.is_imperial:
            return f"{self.distance(meters):.2f} mi"
        if meters >= 1000:
            return f"{meters / 1000:.2f} km"
        return f"{meters:.0f} m"


def format_duration(seconds: Numeric) -> str:
    """Format a duration in seconds as '1h 2m 3s' or '2m 3s'."""
    if not _is_number(seconds):
        return '--:--'
    hours = int(seconds // 3600)
    mins = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}h {mins}m {secs}s"
    return f"{mins}m {secs}s"


def _is_number(value: Any) -> bool:
    return value is not None and np.isfinite(value)
