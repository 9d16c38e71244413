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
Hover annotations for chart panels.

A tooltip has a header (elapsed "MMm SSs" plus, when the flight start is
known, the wall-clock time) and one "name: value" line per visible series.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from .config import ViewerConfig
from .config_models import ChartSeries
from .theme import ThemePalette, get_palette


def format_duration_label(seconds: Any) -> str:
    """Elapsed seconds as zero-padded 'MMm SSs'. Negative or non-finite is 0."""
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        seconds = 0.0
    if not math.isfinite(seconds):
        seconds = 0.0
    total = int(math.floor(max(0.0, seconds)))
    minutes, remaining = divmod(total, 60)
    return f"{minutes:02d}m {remaining:02d}s"


def format_numeric_value(value: float) -> str:
    """
    Magnitude-dependent precision: 0 decimals at or above 100, 1 decimal at or
    above 10 (trailing '.0' stripped), else 2 decimals (trailing '.00' stripped).
    """
    magnitude = abs(value)
    if magnitude >= 100:
        return f"{value:.0f}"
    if magnitude >= 10:
        return re.sub(r"\.0$", "", f"{value:.1f}")
    return re.sub(r"\.00$", "", f"{value:.2f}")


def _is_present(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass
class TooltipContent:
    duration_label: str
    time_label: Optional[str] = None
    lines: List[str] = field(default_factory=list)

    def header_html(self, palette: Optional[ThemePalette] = None) -> str:
        if self.time_label is None:
            return self.duration_label
        palette = palette or get_palette('dark')
        tag = ("display:inline-block;padding:2px 8px;border-radius:999px;"
               "background:{bg};color:{fg};font-size:11px;")
        return (
            f'<span style="{tag.format(bg=palette.duration_tag_background, fg=palette.tag_text)}">'
            f'{self.duration_label}</span> '
            f'<span style="{tag.format(bg=palette.time_tag_background, fg=palette.tag_text)}">'
            f'{self.time_label}</span>'
        )

    def to_html(self, palette: Optional[ThemePalette] = None) -> str:
        return "<br>".join([self.header_html(palette)] + self.lines)


class TooltipFormatter:
    """
    Formats the hover annotation for a time index.

    Args:
        start_time: Flight start as an ISO-8601 string, or None when unknown
        theme: Theme mode used for the header tag colors
        time_format: strftime pattern of the wall-clock label
    """

    def __init__(self, start_time: Optional[str] = None, theme: str = 'dark',
                 time_format: Optional[str] = None):
        self.palette = get_palette(theme)
        self.time_format = time_format or ViewerConfig.TOOLTIP['time_format']
        self.placeholder = ViewerConfig.TOOLTIP['missing_placeholder']
        self.start = None
        if start_time:
            ts = pd.to_datetime(start_time, errors="coerce")
            if not pd.isna(ts):
                self.start = ts

    def header(self, seconds: Any) -> Tuple[str, Optional[str]]:
        duration = format_duration_label(seconds)
        if self.start is None:
            return duration, None
        try:
            elapsed = max(0.0, float(seconds)) if math.isfinite(float(seconds)) else 0.0
        except (TypeError, ValueError):
            elapsed = 0.0
        moment = (self.start + timedelta(seconds=elapsed)).to_pydatetime()
        if moment.tzinfo is not None:
            moment = moment.astimezone()
        return duration, moment.strftime(self.time_format)

    def format_value(self, value: Any) -> str:
        return format_numeric_value(float(value)) if _is_present(value) else self.placeholder

    def format_line(self, name: str, value: Any) -> str:
        return f"{name}: {self.format_value(value)}"

    def format(self, seconds: Any, items: Sequence[Tuple[str, Any]]) -> TooltipContent:
        duration, time_label = self.header(seconds)
        return TooltipContent(
            duration_label=duration,
            time_label=time_label,
            lines=[self.format_line(name, value) for name, value in items],
        )

    def format_at(self, index: int, time: Sequence[float],
                  series: Sequence[ChartSeries]) -> TooltipContent:
        """Tooltip for sample `index` of a panel's visible series."""
        seconds = time[index] if 0 <= index < len(time) else 0.0
        items = []
        for s in series:
            if not s.visible:
                continue
            value = s.data[index] if 0 <= index < len(s.data) else None
            items.append((s.name, value))
        return self.format(seconds, items)

    def __call__(self, seconds: Any, items: Sequence[Tuple[str, Any]]) -> str:
        return self.format(seconds, items).to_html(self.palette)
