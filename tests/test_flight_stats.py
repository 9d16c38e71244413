import pytest

from flightview.flight_stats import FlightSummary, check_track_alignment, format_date_time
from flightview.telemetry import Flight, FlightData, TelemetryData


def make_flight_data(flight=None, track=None, **channels):
    telemetry = TelemetryData(time=[0.0, 60.0, 125.0], channels=channels)
    return FlightData(flight=flight or Flight(id=1), telemetry=telemetry, track=track or [])


def test_summary_derived_from_telemetry():
    data = make_flight_data(
        height=[0.0, 42.0, 10.0],
        speed=[0.0, 12.0, 3.0],
        battery=[95.0, 40.0, 18.0],
        latitude=[None, 47.0, 47.1],
        longitude=[None, 8.0, 8.1],
        track=[(8.0, 47.0, 0.0), (8.01, 47.0, 0.0), (8.02, 47.0, 0.0)],
    )
    summary = FlightSummary.from_flight_data(data)
    assert summary.duration_secs == 125.0
    assert summary.max_altitude_m == 42.0
    assert summary.max_speed_ms == 12.0
    assert summary.min_battery == 18.0
    assert summary.low_battery
    assert summary.home == (47.0, 8.0)
    assert summary.track_aligned
    assert summary.total_distance_m == pytest.approx(1517, rel=0.01)


def test_recorded_metadata_wins():
    flight = Flight(id=2, duration_secs=600.0, total_distance=1500.0, max_altitude=120.0, max_speed=15.0)
    summary = FlightSummary.from_flight_data(make_flight_data(flight=flight, height=[0.0, 1.0, 2.0]))
    assert summary.duration_secs == 600.0
    assert summary.max_altitude_m == 120.0

    labels = summary.labels('metric')
    assert labels['Duration'] == '10m 0s'
    assert labels['Distance'] == '1.50 km'
    assert labels['Max Height'] == '120.0 m'
    assert labels['Max Speed'] == '54.0 km/h'
    assert labels['Min Battery'] == '--'
    assert labels['Home'] == '--'


def test_imperial_labels():
    flight = Flight(id=3, total_distance=1500.0, max_altitude=12.3)
    labels = FlightSummary.from_flight_data(make_flight_data(flight=flight)).labels('imperial')
    assert labels['Distance'] == '0.93 mi'
    assert labels['Max Height'] == '40.4 ft'


def test_track_alignment(caplog):
    data = make_flight_data(track=[(8.0, 47.0, 0.0)])
    assert not check_track_alignment(data.telemetry, data.track)
    with caplog.at_level('WARNING'):
        summary = FlightSummary.from_flight_data(data)
    assert not summary.track_aligned
    assert summary.home == (47.0, 8.0)
    assert "Track has 1 points" in caplog.text


def test_format_date_time():
    assert format_date_time(None) == 'Unknown date'
    assert format_date_time('2024-05-01T10:15:00') == 'May 01, 2024 10:15 AM'
    assert format_date_time('yesterday-ish') == 'yesterday-ish'


def test_home_from_track_when_position_channels_are_empty():
    data = make_flight_data(
        latitude=[None, None, None],
        longitude=[None, None, None],
        track=[(8.0, 47.0, 0.0), (8.01, 47.0, 0.0), (8.02, 47.0, 0.0)],
    )
    assert FlightSummary.from_flight_data(data).home == (47.0, 8.0)
