"""Tests for typed JSON values and the storage error boundary."""

from __future__ import annotations

from datetime import date

import pytest

from canvassbook.core.exceptions import PersistenceError, StorageError
from canvassbook.models.reports import DailyReport
from canvassbook.repository.storage import JsonValue, StorageKeys, storage_boundary
from tests.fakes import MemoryKeyValueStore


def test_keys_carry_prefix():
    keys = StorageKeys.with_prefix("@canvassbook_")
    assert keys.daily_reports == "@canvassbook_daily_reports"
    assert keys.user_profile == "@canvassbook_user_profile"


@pytest.mark.asyncio
async def test_missing_value_loads_none():
    value = JsonValue(MemoryKeyValueStore(), "k", list[DailyReport])
    assert await value.load() is None


@pytest.mark.asyncio
async def test_saves_camel_case_json():
    store = MemoryKeyValueStore()
    value = JsonValue(store, "k", list[DailyReport])
    await value.save([DailyReport(date=date(2025, 1, 6), people_visited=4)])
    raw = await store.get("k")
    assert '"peopleVisited":4' in raw
    loaded = await value.load()
    assert loaded[0].people_visited == 4


@pytest.mark.asyncio
async def test_corrupt_value_raises_storage_error():
    store = MemoryKeyValueStore()
    await store.set("k", "{not json")
    with pytest.raises(StorageError, match="Corrupt value"):
        await JsonValue(store, "k", list[DailyReport]).load()


def test_boundary_wraps_storage_errors():
    with pytest.raises(PersistenceError) as info:
        with storage_boundary("save daily report"):
            raise StorageError("disk full")
    assert info.value.operation == "save daily report"
    assert str(info.value) == "failed to save daily report"
    assert isinstance(info.value.__cause__, StorageError)


def test_boundary_lets_other_errors_through():
    with pytest.raises(ValueError):
        with storage_boundary("anything"):
            raise ValueError("not a storage problem")
