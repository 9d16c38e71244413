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
Configuration settings for the flight telemetry viewer.
"""

import os


class ViewerConfig:
    """Configuration for chart panels, the track map and ambient services."""

    # Axis range estimation
    RANGE = {
        'padding_ratio': 0.08,
        'flat_widen_ratio': 0.1,     # widen a flat series by 10% of |value|
        'flat_widen_zero': 1.0,      # ... or by 1 when the value is 0
        'zero_epsilon': 1e-4
    }

    # Track geometry / map camera
    TRACK = {
        'gradient_start': (250, 204, 21),
        'gradient_end': (239, 68, 68),
        'bounds_padding_ratio': 0.1,
        'bounds_min_padding_deg': 0.001,
        'zoom_base': 16.0,
        'km_per_degree': 111.0,
        'zoom_min': 10.0,
        'zoom_max': 18.0,
        'pitch_3d': 60.0,
        'pitch_2d': 0.0,
        'max_altitude_markers': 800,
        'altitude_ramp': [
            (0.0, (56, 189, 248)),     # #38bdf8
            (50.0, (245, 158, 11)),    # #f59e0b
            (120.0, (249, 115, 22)),   # #f97316
            (200.0, (239, 68, 68)),    # #ef4444
        ],
        'start_marker_color': (34, 197, 94),
        'end_marker_color': (239, 68, 68)
    }

    MAP_STYLES = {
        'dark': 'https://basemaps.cartocdn.com/gl/dark-matter-gl-style/style.json',
        'light': 'https://basemaps.cartocdn.com/gl/positron-gl-style/style.json'
    }

    # "system" theme has no browser media query to consult here
    THEME = {
        'system_preference': os.getenv('FLIGHTVIEW_SYSTEM_THEME', 'dark')
    }

    TOOLTIP = {
        'time_format': '%I:%M %p',
        'missing_placeholder': '-'
    }

    CHARTS = {
        'low_battery_percent': 20.0,
        'rc_signal_interval': 50,
        'line_width': 1.5,
        'primary_line_width': 2.0,
        'show_range_slider': True
    }

    LOGGING = {
        'level': os.getenv('FLIGHTVIEW_LOG_LEVEL', 'INFO'),
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'log_file': os.getenv('FLIGHTVIEW_LOG_FILE')
    }

    PERFORMANCE = {
        'enable_monitoring': os.getenv('FLIGHTVIEW_PERF', 'false').lower() == 'true'
    }
