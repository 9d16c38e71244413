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
Timing and memory measurement of panel and track rebuilds.
"""

import logging
import time
import psutil
import streamlit as st
from contextlib import contextmanager
from typing import Dict, Any, Optional

from .config import ViewerConfig

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """Collects wall time and RSS delta per named operation."""

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = ViewerConfig.PERFORMANCE['enable_monitoring'] if enabled is None else enabled
        self.metrics: Dict[str, Dict[str, float]] = {}

    @contextmanager
    def measure_time(self, operation_name: str):
        if not self.enabled:
            yield
            return

        process = psutil.Process()
        start_time = time.perf_counter()
        start_memory = process.memory_info().rss / 1024 / 1024  # MB
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start_time
            memory_used = process.memory_info().rss / 1024 / 1024 - start_memory
            self.metrics[operation_name] = {
                'execution_time': elapsed,
                'memory_used': memory_used,
                'timestamp': time.time()
            }
            logger.debug(f"{operation_name}: {elapsed:.3f}s, {memory_used:+.1f}MB")

    def get_metrics(self) -> Dict[str, Any]:
        return self.metrics

    def clear(self) -> None:
        self.metrics.clear()

    def display_metrics(self):
        """Show collected metrics in the Streamlit sidebar."""
        if not self.metrics:
            return
        st.sidebar.subheader("⚡ Performance")
        for operation, metrics in self.metrics.items():
            st.sidebar.caption(
                f"{operation}: {metrics['execution_time']:.3f}s / {metrics['memory_used']:+.1f}MB"
            )
