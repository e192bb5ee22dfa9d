"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from canvassbook.core.config import AppSettings, CalendarConfig, StorageConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.data_version == "2.1.0"
    assert settings.storage.key_prefix == "@canvassbook_"


def test_calendar_defaults_to_sunday_start_and_six_pm_cutoff():
    config = CalendarConfig()
    assert config.first_weekday == 6
    assert config.cutoff_hour == 18


def test_calendar_env_override(monkeypatch):
    monkeypatch.setenv("CANVASSBOOK_CALENDAR_FIRST_WEEKDAY", "0")
    monkeypatch.setenv("CANVASSBOOK_CALENDAR_CUTOFF_HOUR", "17")
    config = CalendarConfig()
    assert config.first_weekday == 0
    assert config.cutoff_hour == 17


def test_storage_backend_env_override(monkeypatch):
    monkeypatch.setenv("CANVASSBOOK_STORAGE_BACKEND", "redis")
    assert StorageConfig().backend == "redis"


def test_rejects_out_of_range_weekday():
    with pytest.raises(ValidationError):
        CalendarConfig(first_weekday=7)
