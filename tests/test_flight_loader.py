import io
import json

import numpy as np
import pytest

from flightview.error_handling import FlightDataError
from flightview.flight_loader import FlightLoader
from flightview.telemetry import FlightData, TelemetryData, parse_track


def sample_bundle():
    return {
        "flight": {
            "id": 7,
            "fileName": "DJIFlightRecord_2024-05-01.txt",
            "displayName": "Lake survey",
            "droneModel": "Mavic 3",
            "startTime": "2024-05-01T10:15:00Z",
            "durationSecs": 3.0,
        },
        "telemetry": {
            "time": [0.0, 1.0, 2.0, 3.0],
            "height": [0.0, 5.0, None, 12.0],
            "battery": [99, 98, 98, 97],
            "speed": [0.0, 1.0],
        },
        "track": [[8.0, 47.0, 400.0], [8.001, 47.001, None], [8.002], None],
    }


def test_load_from_dict():
    data = FlightLoader().load(sample_bundle())
    assert isinstance(data, FlightData)
    assert data.flight.display_name == "Lake survey"
    assert data.flight.drone_model == "Mavic 3"
    assert len(data.telemetry) == 4
    assert np.isnan(data.telemetry.channel("height")[2])


def test_mismatched_channel_dropped(caplog):
    with caplog.at_level("WARNING"):
        data = FlightLoader().load(sample_bundle())
    assert data.telemetry.channel("speed") is None
    assert "speed" in caplog.text


def test_load_from_bytes_buffer_and_file(tmp_path):
    payload = json.dumps(sample_bundle()).encode("utf-8")
    loader = FlightLoader()
    assert len(loader.load(payload).telemetry) == 4
    assert len(loader.load(io.BytesIO(payload)).telemetry) == 4

    path = tmp_path / "flight.json"
    path.write_bytes(payload)
    assert loader.load(path).flight.id == 7
    assert loader.list_flights(str(tmp_path)) == [str(path)]


def test_rejects_malformed_bundles(tmp_path):
    loader = FlightLoader()
    with pytest.raises(FlightDataError):
        loader.load(b"{not json")
    with pytest.raises(FlightDataError):
        loader.load(b"[1, 2, 3]")
    with pytest.raises(FlightDataError):
        loader.load({"flight": {}, "telemetry": {"height": [1.0]}})

    other = tmp_path / "flight.csv"
    other.write_text("time,height\n0,1\n")
    with pytest.raises(FlightDataError):
        loader.load(other)


def test_track_parsing():
    track = parse_track(sample_bundle()["track"])
    assert track == [(8.0, 47.0, 400.0), (8.001, 47.001, 0.0)]


def test_has_samples_distinguishes_absent_and_empty():
    telemetry = TelemetryData(time=[0.0, 1.0], channels={"height": [None, None], "speed": [1.0, 2.0]})
    assert not telemetry.has_samples("height")
    assert telemetry.channel("height") is not None
    assert not telemetry.has_samples("altitude")
    assert telemetry.channel("altitude") is None
    assert telemetry.has_samples("speed")


def test_to_frame():
    df = TelemetryData(time=[0.0, 1.0], channels={"speed": [1.0, 2.0]}).to_frame()
    assert list(df.columns) == ["Elapsed Time (s)", "speed"]
