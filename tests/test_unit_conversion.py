import numpy as np
import pytest

from flightview.error_handling import InvalidConfigurationError
from flightview.unit_conversion import UnitConverter, UnitSystem, format_duration, parse_unit_system


def test_length_round_trip_imperial():
    conv = UnitConverter('imperial')
    for meters in (0.0, 1.0, 12.3, 120.0, 4321.5):
        assert conv.length_to_metric(conv.length(meters)) == pytest.approx(meters)


def test_metric_length_passes_through():
    assert UnitConverter('metric').length(42.0) == 42.0


def test_speed_always_converted():
    assert UnitConverter('metric').speed(10.0) == pytest.approx(36.0)
    assert UnitConverter('imperial').speed(10.0) == pytest.approx(22.36936)


def test_null_passes_through():
    conv = UnitConverter('imperial')
    assert conv.length(None) is None
    out = conv.length([1.0, None, 3.0])
    assert np.isnan(out[1])
    assert out[0] == pytest.approx(3.28084)


def test_unknown_unit_system_rejected():
    with pytest.raises(InvalidConfigurationError):
        UnitConverter('nautical')
    with pytest.raises(ValueError):
        parse_unit_system('furlongs')
    assert parse_unit_system('IMPERIAL') is UnitSystem.IMPERIAL


def test_unit_labels():
    assert UnitConverter('metric').length_unit == 'm'
    assert UnitConverter('metric').speed_unit == 'km/h'
    assert UnitConverter('imperial').length_unit == 'ft'
    assert UnitConverter('imperial').speed_unit == 'mph'


def test_format_helpers():
    metric = UnitConverter('metric')
    imperial = UnitConverter('imperial')
    assert metric.format_distance(850) == '850 m'
    assert metric.format_distance(1500) == '1.50 km'
    assert imperial.format_distance(1500) == '0.93 mi'
    assert metric.format_altitude(12.3) == '12.3 m'
    assert imperial.format_altitude(12.3) == '40.4 ft'
    assert metric.format_speed(10) == '36.0 km/h'
    assert imperial.format_speed(10) == '22.4 mph'
    assert metric.format_altitude(None) == '--'
    assert metric.format_speed(float('nan')) == '--'


def test_format_duration():
    assert format_duration(3723) == '1h 2m 3s'
    assert format_duration(123) == '2m 3s'
    assert format_duration(None) == '--:--'


def test_speed_and_distance_inverse_conversions():
    for system in ('metric', 'imperial'):
        conv = UnitConverter(system)
        assert conv.speed_to_metric(conv.speed(12.5)) == pytest.approx(12.5)
        assert conv.distance_to_metric(conv.distance(2500.0)) == pytest.approx(2500.0)
    assert UnitConverter('imperial').distance_to_metric(1.0) == pytest.approx(1609.344)
    assert UnitConverter('metric').speed_to_metric(36.0) == pytest.approx(10.0)
