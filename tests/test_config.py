# tests/test_config.py
from __future__ import annotations

import pytest

from beaver_task.config import BeaverSettings


def test_settings_parse_comma_lists():
    settings = BeaverSettings(ALLOWED_ORIGINS="http://a.test, http://b.test", LOG_TO_FILE=False)
    assert settings.ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]


def test_settings_normalize_environment_and_level():
    settings = BeaverSettings(ENVIRONMENT="Staging", LOG_LEVEL="debug")
    assert settings.ENVIRONMENT == "staging"
    assert settings.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize(
    "field, value",
    [("TIMEZONE", "Mars/Olympus"), ("PORT", 0), ("ENVIRONMENT", "moon"), ("TIMER_TICK_SECONDS", 0)],
)
def test_settings_reject_bad_values(field, value):
    with pytest.raises(ValueError):
        BeaverSettings(**{field: value})


def test_production_disables_docs():
    settings = BeaverSettings(ENVIRONMENT="production", DEBUG=True)
    assert settings.DEBUG is False
    assert settings.DOCS_URL is None
    assert settings.is_production


def test_pomodoro_defaults_and_tz():
    settings = BeaverSettings(TIMEZONE="Europe/Berlin", POMODORO_FOCUS_MINUTES=50)
    assert settings.pomodoro_defaults() == {"FOCUS": 50, "SHORT_BREAK": 5, "LONG_BREAK": 15}
    assert settings.tz.zone == "Europe/Berlin"


def test_settings_have_no_unused_fields():
    assert "SECRET_KEY" not in BeaverSettings.model_fields
    assert "DATA_DIR" not in BeaverSettings.model_fields
