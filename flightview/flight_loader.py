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
Loading of flight bundles handed over by the storage layer.

A bundle is a JSON object with "flight", "telemetry" and "track" keys. It
can come from a file path, a Streamlit upload, raw bytes or an already
decoded dict.
"""
# Standard Libraries
import io
import json
import logging
import os
from typing import Any, Dict, List, Union

# Local Modules
from .error_handling import FlightDataError
from .telemetry import FlightData

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, io.IOBase, Dict[str, Any]]


class FlightLoader:
    """
    Reads flight bundles into FlightData.
    """

    def __init__(self):
        self.supported_formats = ['.json']

    def _decode(self, raw: Union[bytes, str]) -> Dict[str, Any]:
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8-sig')
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise FlightDataError(f"Flight bundle is not valid JSON: {e}") from e

    def _read_source(self, source: Source) -> Any:
        if isinstance(source, dict):
            return source
        if isinstance(source, bytes):
            return self._decode(source)
        if hasattr(source, 'read'):
            # Streamlit UploadedFile, BytesIO or an open text file
            return self._decode(source.read())
        path = os.fspath(source)
        ext = os.path.splitext(path)[1].lower()
        if ext not in self.supported_formats:
            raise FlightDataError(f"Unsupported file type '{ext}'; expected one of {self.supported_formats}")
        with open(path, 'rb') as f:
            return self._decode(f.read())

    def load(self, source: Source) -> FlightData:
        """
        Load one flight bundle.

        Args:
            source: Path, upload buffer, bytes or decoded dict

        Returns:
            FlightData with metadata, telemetry and track

        Raises:
            FlightDataError: when the bundle is not a JSON object or has no
                telemetry time axis
        """
        payload = self._read_source(source)
        data = FlightData.from_dict(payload)
        logger.info(
            f"Loaded flight '{data.flight.display_name or data.flight.id}': "
            f"{len(data.telemetry)} samples, {len(data.telemetry.channels)} channels, "
            f"{len(data.track)} track points"
        )
        return data

    def list_flights(self, directory: str) -> List[str]:
        """Bundle files in a directory, sorted by name."""
        if not os.path.isdir(directory):
            return []
        return sorted(
            os.path.join(directory, name)
            for name in os.listdir(directory)
            if os.path.splitext(name)[1].lower() in self.supported_formats
        )
