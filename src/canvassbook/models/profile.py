"""Canvasser profile and device settings records."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from canvassbook.models.reports import CamelModel


class UserProfile(CamelModel):
    """Owner of every generated report; name and phone are copied into them."""

    id: str = ""
    full_name: str
    phone_number: str = ""
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class UserSettings(CamelModel):
    """Persisted app preferences. Defaults apply until the user changes them."""

    biometric_enabled: bool = False
    auto_lock_weeks: bool = True
    reminder_notifications: bool = False
    last_backup: Optional[dt.datetime] = None
    auth_method: Literal["password", "pin", "pattern", "biometric"] = "password"
    theme: Literal["light", "dark"] = "light"
    language: Literal["sw", "en"] = "sw"
    first_use_date: Optional[dt.date] = None
