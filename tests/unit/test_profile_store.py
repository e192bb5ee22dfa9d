"""Tests for ProfileStore — profile and settings persistence."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from tests.fakes import TUESDAY_MORNING


@pytest.mark.asyncio
async def test_no_profile_initially(repository):
    assert await repository.profiles.get_user_profile() is None
    assert await repository.profiles.has_user_profile() is False


@pytest.mark.asyncio
async def test_save_profile_sets_timestamps_and_notifies(repository, profile, events):
    stored = await repository.profiles.save_user_profile(profile)
    assert stored.created_at == TUESDAY_MORNING
    assert stored.updated_at == TUESDAY_MORNING
    assert events == ["profileUpdated"]
    assert (await repository.profiles.get_user_profile()).phone_number == "+255700111222"


@pytest.mark.asyncio
async def test_resave_keeps_created_at(repository, profile, clock):
    stored = await repository.profiles.save_user_profile(profile)
    clock.advance(days=1)
    again = await repository.profiles.save_user_profile(stored.model_copy(update={"full_name": "Asha M."}))
    assert again.created_at == TUESDAY_MORNING
    assert again.updated_at == clock.now


@pytest.mark.asyncio
async def test_settings_default_until_saved(repository):
    settings = await repository.profiles.get_settings()
    assert settings.auto_lock_weeks is True
    assert settings.theme == "light"


@pytest.mark.asyncio
async def test_update_settings_merges_and_notifies(repository, events):
    updated = await repository.profiles.update_settings(theme="dark", reminderNotifications=True)
    assert updated.theme == "dark"
    assert updated.reminder_notifications is True
    assert updated.language == "sw"
    assert events == ["settingsUpdated"]


@pytest.mark.asyncio
async def test_update_settings_rejects_bad_values(repository):
    with pytest.raises(ValidationError):
        await repository.profiles.update_settings(theme="purple")


@pytest.mark.asyncio
async def test_first_use_date_is_written_once(repository):
    assert await repository.profiles.set_first_use_date() == date(2025, 1, 7)
    assert await repository.profiles.set_first_use_date(date(2025, 3, 1)) == date(2025, 1, 7)
    assert (await repository.profiles.get_settings()).first_use_date == date(2025, 1, 7)
