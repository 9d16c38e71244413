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
Plotly `config` dicts for the chart panels.
"""

import re


def sanitize_filename(name: str, max_length: int = 80) -> str:
    """Collapse unsafe characters to single underscores; 'chart' when nothing is left."""
    cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", name or "")
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")[:max_length]
    return cleaned or "chart"


def panel_config(flight_name: str, panel_id: str, img_format: str = "png", scale: int = 2) -> dict:
    """
    Plotly config for one panel: download button named after the flight
    and panel, scroll zoom on, selection tools removed.
    """
    return dict(
        displaylogo=False,
        responsive=True,
        scrollZoom=True,
        toImageButtonOptions=dict(
            format=img_format,  # "png", "svg", "jpeg", "webp"
            filename=sanitize_filename(f"{flight_name}_{panel_id}"),
            scale=scale
        ),
        modeBarButtonsToRemove=["lasso2d", "select2d"]
    )
