"""Export/import snapshot of the whole local data set."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from canvassbook.models.profile import UserProfile, UserSettings
from canvassbook.models.reports import CamelModel, DailyReport, MonthlyReport, WeeklyReport

REQUIRED_SNAPSHOT_KEYS = ("version", "userProfile")


class ExportSnapshot(CamelModel):
    user_profile: Optional[UserProfile] = None
    daily_reports: list[DailyReport] = Field(default_factory=list)
    weekly_reports: list[WeeklyReport] = Field(default_factory=list)
    monthly_reports: list[MonthlyReport] = Field(default_factory=list)
    settings: Optional[UserSettings] = None
    last_sync: Optional[dt.datetime] = None
    export_date: Optional[dt.datetime] = None
    version: str
