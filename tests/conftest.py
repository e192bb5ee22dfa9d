"""Shared fixtures: a fresh repository over an in-memory store per test."""

from __future__ import annotations

import pytest

from canvassbook.core.config import AppSettings, StorageConfig
from canvassbook.events.bus import EventBus
from canvassbook.models.profile import UserProfile
from canvassbook.repository.reports import ReportRepository
from tests.fakes import TUESDAY_MORNING, FrozenClock, MemoryKeyValueStore


@pytest.fixture
def settings():
    return AppSettings(storage=StorageConfig(backend="memory"))


@pytest.fixture
def clock():
    return FrozenClock(TUESDAY_MORNING)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def repository(store, bus, settings, clock):
    return ReportRepository(store, bus, settings, clock=clock)


@pytest.fixture
def profile():
    return UserProfile(id="profile_1", full_name="Asha Mwita", phone_number="+255700111222")


@pytest.fixture
def events(bus):
    """Record every published event name in order."""
    seen: list[str] = []
    for name in ("reportsUpdated", "profileUpdated", "settingsUpdated", "dataCleared"):
        bus.subscribe(name, lambda name=name: seen.append(name))
    return seen
