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
Error taxonomy and logging setup for the flight telemetry viewer.
"""

import logging
import traceback
import streamlit as st
from typing import Any, Callable, Optional, Tuple, Type
from functools import wraps

from .config import ViewerConfig

logger = logging.getLogger(__name__)


class FlightViewError(Exception):
    """Base class for errors raised by the viewer core."""


class InvalidConfigurationError(FlightViewError, ValueError):
    """A caller passed an unrecognized unit system, theme or similar setting."""


class FlightDataError(FlightViewError, ValueError):
    """A telemetry bundle is not shaped like a flight at all."""


_logging_configured = False


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logging once for the host application.

    Args:
        level: Log level name; defaults to ViewerConfig.LOGGING['level']
        log_file: Optional file to mirror log output to
    """
    global _logging_configured
    if _logging_configured:
        return

    handlers = [logging.StreamHandler()]
    log_file = log_file or ViewerConfig.LOGGING['log_file']
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, (level or ViewerConfig.LOGGING['level']).upper(), logging.INFO),
        format=ViewerConfig.LOGGING['format'],
        handlers=handlers
    )
    _logging_configured = True


def handle_errors(operation_name: str, show_error: bool = True,
                  reraise: Tuple[Type[BaseException], ...] = (InvalidConfigurationError,)):
    """
    Decorator for handling errors in host-level operations.

    Configuration errors are re-raised after logging so a contract violation
    is never hidden behind an empty panel.

    Args:
        operation_name: Name of the operation for logging
        show_error: Whether to show error in Streamlit UI
        reraise: Exception types that propagate after being logged
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_msg = f"Error in {operation_name}: {str(e)}"
                logger.error(f"{error_msg}\n{traceback.format_exc()}")

                if show_error:
                    st.error(f"❌ {error_msg}")

                if isinstance(e, reraise):
                    raise
                return None
        return wrapper
    return decorator
