import pytest

from flightview.chart_manager import TOOLTIP_TRACE_NAME, ChartPanelSet
from flightview.config_models import ZoomWindow
from flightview.error_handling import InvalidConfigurationError
from flightview.telemetry import TelemetryData


def sample_telemetry(n=20):
    time = [float(i) for i in range(n)]
    return TelemetryData(time=time, channels={
        'height': [i * 2.0 for i in range(n)],
        'speed': [5.0] * n,
        'battery': [100.0 - i for i in range(n)],
        'batteryTemp': [30.0 + i * 0.1 for i in range(n)],
        'batteryVoltage': [15.0] * n,
        'pitch': [(-1) ** i * 3.0 for i in range(n)],
        'roll': [0.0] * n,
        'yaw': [i * 10.0 for i in range(n)],
        'rcSignal': [95.0] * n,
        'satellites': [12.0] * n,
        'latitude': [47.0 + i * 1e-4 for i in range(n)],
        'longitude': [8.0] * n,
    })


def make_panel_set(**kwargs):
    kwargs.setdefault('theme_mode', 'dark')
    return ChartPanelSet(sample_telemetry(), **kwargs)


def test_panels_in_display_order():
    panels = make_panel_set().build_panels()
    assert [p.id for p in panels] == [
        'altitude_speed', 'battery', 'attitude', 'rc_signal', 'distance_to_home', 'velocity', 'gps'
    ]
    assert all(len(p.time) == 20 for p in panels)


def test_axis_ranges():
    panel_set = make_panel_set()
    battery = panel_set.panel('battery')
    assert 0 <= battery.axes[0].range.min < battery.axes[0].range.max <= 100
    assert battery.axes[2].visible is False
    assert battery.mark_areas[0].y_to == 20.0

    rc = panel_set.panel('rc_signal')
    assert (rc.axes[0].range.min, rc.axes[0].range.max) == (0.0, 100.0)
    assert rc.axes[0].interval == 50

    assert panel_set.panel('distance_to_home').axes[0].range.min >= 0
    assert panel_set.panel('gps').axes[0].range.min >= 0
    # No velocity channels at all: renderer auto-scales
    assert panel_set.panel('velocity').axes[0].range.is_empty


def test_imperial_units_on_axes():
    panel = make_panel_set(unit_system='imperial').panel('altitude_speed')
    assert panel.axes[0].title == 'Height (ft)'
    assert panel.axes[1].title == 'Speed (mph)'


def test_invalid_configuration_rejected():
    with pytest.raises(InvalidConfigurationError):
        make_panel_set(unit_system='parsecs')
    with pytest.raises(InvalidConfigurationError):
        make_panel_set(theme_mode='sepia')


def test_panel_serialization():
    data = make_panel_set().panel('attitude').as_dict()
    assert data['legend'] == ['Pitch', 'Roll', 'Yaw']
    assert data['schema_version'] == 1
    assert 'tooltip' not in data


def test_tooltip_callable():
    panel = ChartPanelSet(sample_telemetry(), theme_mode='light',
                          start_time='2024-05-01T10:15:00').panel('altitude_speed')
    html = panel.tooltip(3)
    assert '00m 03s' in html
    assert '10:15 AM' in html
    assert 'Height: 6' in html


def test_figure_has_one_axis_per_axis_config():
    panel_set = make_panel_set()
    fig = panel_set.create_figure(panel_set.panel('battery'))
    assert len(fig.data) == 4
    assert fig.data[-1].name == TOOLTIP_TRACE_NAME
    assert fig.data[1].yaxis == 'y2'
    assert fig.layout.yaxis2.overlaying == 'y'
    assert fig.layout.yaxis3.visible is False
    assert len(fig.layout.shapes) == 1
    assert fig.layout.xaxis.rangeslider.visible is True


def test_mount_is_idempotent_and_unmount_deregisters():
    panel_set = make_panel_set()
    fig = panel_set.mount('gps')
    assert panel_set.mount('gps') is fig
    assert len(panel_set.sync) == 1

    assert panel_set.unmount('gps') is True
    assert 'gps' not in panel_set.sync
    assert panel_set.figure('gps') is None


def test_zoom_propagates_between_figures():
    panel_set = make_panel_set()
    panel_set.mount_all()
    assert len(panel_set.sync) == 7

    assert panel_set.on_zoom('battery', ZoomWindow(start_value=4.0, end_value=9.0))
    for panel_id in panel_set.mounted_ids:
        assert list(panel_set.figure(panel_id).layout.xaxis.range) == [4.0, 9.0]
    panel_set.sync.end_tick()

    panel_set.reset_zoom()
    assert all(panel_set.figure(pid).layout.xaxis.range is None for pid in panel_set.mounted_ids)


def test_unknown_panel():
    with pytest.raises(KeyError):
        make_panel_set().mount('vibration')
