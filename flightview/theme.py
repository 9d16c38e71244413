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
Theme mode resolution and chart palettes.
"""

from dataclasses import dataclass
from typing import Optional

from .config import ViewerConfig
from .error_handling import InvalidConfigurationError

THEME_MODES = ('system', 'dark', 'light')


@dataclass(frozen=True)
class ThemePalette:
    name: str
    plotly_template: str
    split_line: str
    axis_line: str
    axis_label: str
    tooltip_background: str
    tooltip_border: str
    tooltip_text: str
    duration_tag_background: str
    time_tag_background: str
    tag_text: str


PALETTES = {
    'dark': ThemePalette(
        name='dark',
        plotly_template='plotly_dark',
        split_line='#2a2a4e',
        axis_line='#4a4e69',
        axis_label='#9ca3af',
        tooltip_background='#16213e',
        tooltip_border='#4a4e69',
        tooltip_text='#ffffff',
        duration_tag_background='rgba(0,212,170,0.2)',
        time_tag_background='rgba(0,160,220,0.22)',
        tag_text='#e2e8f0',
    ),
    'light': ThemePalette(
        name='light',
        plotly_template='plotly_white',
        split_line='#e2e8f0',
        axis_line='#cbd5e1',
        axis_label='#475569',
        tooltip_background='#ffffff',
        tooltip_border='#e2e8f0',
        tooltip_text='#0f172a',
        duration_tag_background='rgba(15, 23, 42, 0.08)',
        time_tag_background='rgba(2, 132, 199, 0.12)',
        tag_text='#0f172a',
    ),
}


def resolve_theme_mode(mode: str, system_preference: Optional[str] = None) -> str:
    """
    Resolve a theme mode to 'dark' or 'light'.

    Args:
        mode: 'system', 'dark' or 'light'
        system_preference: What 'system' maps to; defaults to
            ViewerConfig.THEME['system_preference']

    Raises:
        InvalidConfigurationError: for an unknown mode or preference
    """
    if mode not in THEME_MODES:
        raise InvalidConfigurationError(
            f"Unknown theme mode {mode!r}; expected one of {list(THEME_MODES)}"
        )
    if mode != 'system':
        return mode
    preference = system_preference or ViewerConfig.THEME['system_preference']
    if preference not in PALETTES:
        raise InvalidConfigurationError(
            f"System theme preference must be 'dark' or 'light', got {preference!r}"
        )
    return preference


def get_palette(mode: str, system_preference: Optional[str] = None) -> ThemePalette:
    return PALETTES[resolve_theme_mode(mode, system_preference)]
