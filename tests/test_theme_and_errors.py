import logging

import pytest

from flightview.error_handling import (
    FlightDataError, FlightViewError, InvalidConfigurationError, handle_errors
)
from flightview.plotly_ui import panel_config, sanitize_filename
from flightview.theme import get_palette, resolve_theme_mode


def test_theme_resolution():
    assert resolve_theme_mode('dark') == 'dark'
    assert resolve_theme_mode('light') == 'light'
    assert resolve_theme_mode('system', system_preference='light') == 'light'
    assert resolve_theme_mode('system', system_preference='dark') == 'dark'
    assert get_palette('light').plotly_template == 'plotly_white'


def test_unknown_theme_rejected():
    with pytest.raises(InvalidConfigurationError):
        resolve_theme_mode('solarized')
    with pytest.raises(InvalidConfigurationError):
        resolve_theme_mode('system', system_preference='sepia')


def test_error_taxonomy():
    assert issubclass(InvalidConfigurationError, FlightViewError)
    assert issubclass(InvalidConfigurationError, ValueError)
    assert issubclass(FlightDataError, FlightViewError)


def test_handle_errors_logs_and_swallows(caplog):
    @handle_errors("exploding operation", show_error=False)
    def explode():
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR):
        assert explode() is None
    assert "Error in exploding operation: boom" in caplog.text


def test_handle_errors_reraises_configuration_errors():
    @handle_errors("configure", show_error=False)
    def bad_config():
        raise InvalidConfigurationError("unknown unit system")

    with pytest.raises(InvalidConfigurationError):
        bad_config()


def test_handle_errors_passes_result_through():
    @handle_errors("add", show_error=False)
    def add(a, b):
        return a + b

    assert add(2, 3) == 5


def test_plotly_config():
    assert sanitize_filename("Lake survey #2 / 2024") == "Lake_survey_2_2024"
    assert sanitize_filename("///") == "chart"
    config = panel_config("Lake survey", "battery")
    assert config["toImageButtonOptions"]["filename"] == "Lake_survey_battery"
    assert config["displaylogo"] is False
