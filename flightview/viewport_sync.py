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
Zoom synchronization across chart panels.

Panels register a handle under a stable id. When the user zooms one panel,
the controller copies that panel's zoom window onto every other registered
panel. Applying a window to a panel usually fires the panel's own zoom
event; a broadcast flag suppresses that echo until `end_tick()`.
"""

import logging
from typing import Callable, Dict, List, Optional, Protocol, Sequence

import numpy as np
import plotly.graph_objects as go

from .config_models import ZoomWindow

logger = logging.getLogger(__name__)


class PanelHandle(Protocol):
    """Anything whose zoom window can be read and written."""

    def get_zoom_window(self) -> ZoomWindow:
        ...

    def set_zoom_window(self, window: ZoomWindow) -> None:
        ...


class ViewportSyncController:
    """
    Registry of panel handles plus the rebroadcast logic.

    Args:
        defer: Optional scheduler taking a zero-argument callback. When
            given, `end_tick` is scheduled through it after each broadcast;
            otherwise the host calls `end_tick()` itself.
    """

    def __init__(self, defer: Optional[Callable[[Callable[[], None]], None]] = None):
        self._handles: Dict[str, PanelHandle] = {}
        self._broadcasting = False
        self._defer = defer

    @property
    def is_broadcasting(self) -> bool:
        return self._broadcasting

    @property
    def registered_ids(self) -> List[str]:
        return list(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, panel_id: str) -> bool:
        return panel_id in self._handles

    def register(self, panel_id: str, handle: PanelHandle) -> bool:
        """
        Register a handle under `panel_id`.

        Returns:
            False when this exact handle is already registered (under any
            id), True otherwise (a different handle replaces the previous one).
        """
        if any(h is handle for h in self._handles.values()):
            return False
        self._handles[panel_id] = handle
        logger.debug(f"Registered panel '{panel_id}'")
        return True

    def unregister(self, panel_id: str) -> bool:
        removed = self._handles.pop(panel_id, None) is not None
        if removed:
            logger.debug(f"Unregistered panel '{panel_id}'")
        return removed

    def on_zoom(self, panel_id: str) -> bool:
        """
        Rebroadcast the zoom window of `panel_id` to every other panel.

        Returns:
            True if a broadcast happened, False when it was suppressed
            (broadcast already in progress or unknown panel).
        """
        if self._broadcasting:
            logger.debug(f"Ignoring zoom from '{panel_id}' during broadcast")
            return False
        source = self._handles.get(panel_id)
        if source is None:
            return False

        window = source.get_zoom_window()
        self._broadcasting = True
        targets = [pid for pid in list(self._handles) if pid != panel_id]
        for target_id in targets:
            # A target may have been unregistered by an earlier target
            target = self._handles.get(target_id)
            if target is None:
                continue
            target.set_zoom_window(window)
        logger.debug(f"Broadcast zoom {window} from '{panel_id}' to {len(targets)} panels")

        if self._defer is not None:
            self._defer(self.end_tick)
        return True

    def end_tick(self) -> None:
        """Clear the broadcast flag."""
        self._broadcasting = False

    def reset_zoom(self) -> None:
        """Show the full time range on every registered panel."""
        for panel_id in list(self._handles):
            handle = self._handles.get(panel_id)
            if handle is not None:
                handle.set_zoom_window(ZoomWindow.full())


class PlotlyFigureHandle:
    """
    PanelHandle over a Plotly figure whose x axis is the panel time axis.

    Percent windows are mapped onto [time[0], time[-1]]; explicit
    start/end values are used as-is. The full window clears the range and
    restores autorange.
    """

    def __init__(self, figure: go.Figure, time: Sequence[float]):
        self.figure = figure
        finite = np.asarray(time, dtype=float)
        finite = finite[np.isfinite(finite)]
        self.t_min = float(finite.min()) if finite.size else 0.0
        self.t_max = float(finite.max()) if finite.size else 0.0

    @property
    def span(self) -> float:
        return self.t_max - self.t_min

    def _to_value(self, percent: Optional[float], default: float) -> float:
        if percent is None:
            return default
        return self.t_min + self.span * percent / 100.0

    def _to_percent(self, value: float) -> float:
        if self.span <= 0:
            return 0.0
        return (value - self.t_min) / self.span * 100.0

    def get_zoom_window(self) -> ZoomWindow:
        x_range = self.figure.layout.xaxis.range
        if x_range is None:
            return ZoomWindow.full()
        lo, hi = float(x_range[0]), float(x_range[1])
        return ZoomWindow(
            start=self._to_percent(lo),
            end=self._to_percent(hi),
            start_value=lo,
            end_value=hi,
        )

    def set_zoom_window(self, window: ZoomWindow) -> None:
        if window.start_value is None and window.end_value is None \
                and (window.start or 0.0) <= 0.0 and (window.end if window.end is not None else 100.0) >= 100.0:
            self.figure.layout.xaxis.range = None
            self.figure.layout.xaxis.autorange = True
            return
        lo = window.start_value if window.start_value is not None else self._to_value(window.start, self.t_min)
        hi = window.end_value if window.end_value is not None else self._to_value(window.end, self.t_max)
        self.figure.layout.xaxis.range = [lo, hi]
        self.figure.layout.xaxis.autorange = False
