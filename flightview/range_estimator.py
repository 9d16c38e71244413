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
Axis range estimation for chart panels.

Produces padded, optionally clamped and magnitude-rounded bounds for one or
more nullable series sharing an axis. An empty result means "let the
renderer auto-scale".
"""

from typing import Any, Iterable, Optional

import numpy as np

from .config import ViewerConfig
from .config_models import DisplayRange


def _finite_values(values: Any) -> np.ndarray:
    """Flatten one series or a list of series into the finite samples only."""
    if isinstance(values, np.ndarray) and values.dtype != object:
        flat = values.astype(float).ravel()
    else:
        flat = []
        for item in values:
            if isinstance(item, (list, tuple, np.ndarray)):
                flat.extend(item)
            else:
                flat.append(item)
        flat = np.array([np.nan if v is None else v for v in flat], dtype=float)
    return flat[np.isfinite(flat)]


def round_axis_value(value: float) -> float:
    """
    Round an axis bound to a precision that depends on its magnitude.

    0 decimals at or above 100, 1 decimal at or above 10, else 2 decimals.
    Values within 1e-4 of zero become exactly 0.
    """
    if abs(value) < ViewerConfig.RANGE['zero_epsilon']:
        return 0.0
    magnitude = abs(value)
    decimals = 0 if magnitude >= 100 else 1 if magnitude >= 10 else 2
    rounded = round(value, decimals)
    return 0.0 if rounded == 0 else float(rounded)


def _widen_delta(value: float) -> float:
    if value == 0:
        return ViewerConfig.RANGE['flat_widen_zero']
    return abs(value) * ViewerConfig.RANGE['flat_widen_ratio']


def _clamp(lo: float, hi: float, clamp_min: Optional[float], clamp_max: Optional[float]):
    if clamp_min is not None:
        lo = max(lo, clamp_min)
    if clamp_max is not None:
        hi = min(hi, clamp_max)
    return lo, hi


def compute_range(values: Iterable[Any],
                  clamp_min: Optional[float] = None,
                  clamp_max: Optional[float] = None,
                  padding_ratio: Optional[float] = None) -> DisplayRange:
    """
    Compute display bounds for one or more series.

    Args:
        values: A nullable numeric sequence, or a list of such sequences that
            share one axis (e.g. height and VPS height)
        clamp_min: Lower limit applied after padding
        clamp_max: Upper limit applied after padding
        padding_ratio: Fraction of the span added on each side (default 0.08)

    Returns:
        DisplayRange with both bounds set and min < max, or an empty
        DisplayRange when there is no finite sample.
    """
    cleaned = _finite_values(values)
    if cleaned.size == 0:
        return DisplayRange()

    if padding_ratio is None:
        padding_ratio = ViewerConfig.RANGE['padding_ratio']

    lo = float(cleaned.min())
    hi = float(cleaned.max())
    if lo == hi:
        delta = _widen_delta(lo)
        lo -= delta
        hi += delta

    padding = (hi - lo) * padding_ratio
    lo -= padding
    hi += padding

    lo, hi = _clamp(lo, hi, clamp_min, clamp_max)
    lo = round_axis_value(lo)
    hi = round_axis_value(hi)

    if lo >= hi:
        # Rounding (or a clamp excluding every sample) collapsed the range
        center = lo if lo == hi else (lo + hi) / 2
        bump = _widen_delta(center)
        lo, hi = _clamp(round_axis_value(center - bump), round_axis_value(center + bump),
                        clamp_min, clamp_max)

    if lo >= hi:
        # Widen away from the edge pinned by a clamp
        if clamp_max is not None and hi >= clamp_max:
            lo = round_axis_value(hi - _widen_delta(hi))
        else:
            hi = round_axis_value(lo + _widen_delta(lo))
        if lo >= hi:
            hi = round_axis_value(lo + ViewerConfig.RANGE['flat_widen_zero'])

    return DisplayRange(min=lo, max=hi)
