"""ProfileStore — user profile and device settings.

The aggregation side only reads from here; profile name and phone are copied
into every generated report.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from canvassbook.core.protocols import IEventBus, IKeyValueStore
from canvassbook.core.types import Clock
from canvassbook.events.bus import ReportEvent
from canvassbook.models.profile import UserProfile, UserSettings
from canvassbook.repository.storage import JsonValue, StorageKeys, storage_boundary

logger = logging.getLogger(__name__)


class ProfileStore:
    def __init__(
        self,
        store: IKeyValueStore,
        keys: StorageKeys,
        bus: IEventBus,
        *,
        clock: Clock = datetime.now,
    ) -> None:
        self._profile: JsonValue[UserProfile] = JsonValue(store, keys.user_profile, UserProfile)
        self._settings: JsonValue[UserSettings] = JsonValue(store, keys.settings, UserSettings)
        self._bus = bus
        self._clock = clock

    async def get_user_profile(self) -> UserProfile | None:
        with storage_boundary("load user profile"):
            return await self._profile.load()

    async def has_user_profile(self) -> bool:
        return await self.get_user_profile() is not None

    async def save_user_profile(self, profile: UserProfile) -> UserProfile:
        now = self._clock()
        stored = profile.model_copy(update={
            "created_at": profile.created_at or now,
            "updated_at": now,
        })
        with storage_boundary("save user profile"):
            await self._profile.save(stored)
        self._bus.publish(ReportEvent.PROFILE_UPDATED)
        return stored

    async def get_settings(self) -> UserSettings:
        with storage_boundary("load settings"):
            return await self._settings.load() or UserSettings()

    async def save_settings(self, settings: UserSettings) -> UserSettings:
        with storage_boundary("update settings"):
            await self._settings.save(settings)
        self._bus.publish(ReportEvent.SETTINGS_UPDATED)
        return settings

    async def update_settings(self, **changes: Any) -> UserSettings:
        """Merge ``changes`` (snake_case or camelCase names) into the stored settings."""
        current = await self.get_settings()
        names = {field.alias or name: name for name, field in UserSettings.model_fields.items()}
        normalized = {names.get(key, key): value for key, value in changes.items()}
        merged = UserSettings.model_validate({**current.model_dump(), **normalized})
        return await self.save_settings(merged)

    async def set_first_use_date(self, today: date | None = None) -> date:
        settings = await self.get_settings()
        if settings.first_use_date is not None:
            return settings.first_use_date
        first_use = today or self._clock().date()
        logger.info("Recording first use date %s", first_use.isoformat())
        await self.save_settings(settings.model_copy(update={"first_use_date": first_use}))
        return first_use
