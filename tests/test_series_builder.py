import pytest

from flightview.series_builder import RC_COMBINED, RC_SPLIT, SeriesBuilder
from flightview.telemetry import TelemetryData


def make_telemetry(n=3, **channels):
    return TelemetryData(time=[float(i) for i in range(n)], channels=channels)


def test_height_falls_back_to_altitude_when_empty():
    telemetry = make_telemetry(height=[None, None, None], altitude=[10.0, 20.0, 30.0])
    height = SeriesBuilder(telemetry, 'metric').altitude_speed()[0]
    assert height.name == 'Height'
    assert height.data == [10.0, 20.0, 30.0]

    imperial = SeriesBuilder(telemetry, 'imperial').altitude_speed()[0]
    assert imperial.data == pytest.approx([32.8084, 65.6168, 98.4252])
    assert imperial.unit == 'ft'


def test_partial_height_is_never_blended():
    telemetry = make_telemetry(height=[None, 5.0, None], altitude=[1.0, 2.0, 3.0])
    height = SeriesBuilder(telemetry).altitude_speed()[0]
    assert height.data == [None, 5.0, None]


def test_missing_channels_become_full_length_null_series():
    telemetry = make_telemetry(n=4, speed=[1.0, 2.0, 3.0, 4.0])
    series = SeriesBuilder(telemetry).build_all()
    for panel_series in series.values():
        for s in panel_series:
            assert len(s.data) == 4
    assert series['velocity'][0].data == [None, None, None, None]
    assert series['altitude_speed'][2].data == pytest.approx([3.6, 7.2, 10.8, 14.4])


def test_rc_combined_mode_without_link_channels():
    builder = SeriesBuilder(make_telemetry(rcSignal=[90.0, 80.0, 70.0], rcUplink=[None, None, None]))
    assert builder.rc_mode == RC_COMBINED
    assert [s.name for s in builder.rc_signal()] == ['RC Signal']


def test_rc_split_mode_with_uplink():
    builder = SeriesBuilder(make_telemetry(rcSignal=[90.0, 80.0, 70.0], rcUplink=[None, 99.0, None]))
    assert builder.rc_mode == RC_SPLIT
    uplink, downlink = builder.rc_signal()
    assert (uplink.name, downlink.name) == ('RC Uplink', 'RC Downlink')
    assert downlink.data == [None, None, None]


def test_distance_to_home_from_telemetry_positions():
    telemetry = make_telemetry(latitude=[None, 10.0, 10.0], longitude=[None, 20.0, 20.0])
    (distance,) = SeriesBuilder(telemetry).distance_to_home()
    assert distance.data == [None, 0.0, 0.0]


def test_distance_to_home_from_aligned_track():
    track = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 0.0, 0.0)]
    (distance,) = SeriesBuilder(make_telemetry(), track=track).distance_to_home()
    assert distance.data[0] == 0.0
    assert distance.data[1] == pytest.approx(111195, rel=0.01)


def test_distance_to_home_null_for_misaligned_track(caplog):
    track = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)]
    with caplog.at_level('WARNING'):
        (distance,) = SeriesBuilder(make_telemetry(), track=track).distance_to_home()
    assert distance.data == [None, None, None]
    assert "distance to home is unavailable" in caplog.text


def test_battery_series_axes():
    telemetry = make_telemetry(battery=[90.0, 80.0, 70.0], batteryTemp=[30.0, 31.0, 32.0],
                               batteryVoltage=[15.2, 15.0, 14.8])
    battery, temperature, voltage = SeriesBuilder(telemetry).battery()
    assert (battery.axis_index, temperature.axis_index, voltage.axis_index) == (0, 1, 2)
    assert temperature.unit == '°C'
    assert voltage.unit == 'V'


def test_all_null_position_channels_fall_back_to_aligned_track():
    telemetry = make_telemetry(latitude=[None, None, None], longitude=[None, None, None])
    track = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 0.0, 0.0)]
    (distance,) = SeriesBuilder(telemetry, track=track).distance_to_home()
    assert distance.data[0] == 0.0
    assert distance.data[1] == pytest.approx(111195, rel=0.01)
