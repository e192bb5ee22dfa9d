"""Read-only summaries built from daily and weekly reports."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import Field

from canvassbook.models.reports import CamelModel, DailyReport


class WorkDay(CamelModel):
    date: dt.date
    day_name: str
    is_today: bool = False
    is_completed: bool = False


class WorkWeekInfo(CamelModel):
    week_start_date: dt.date
    week_end_date: dt.date
    work_days: list[WorkDay] = Field(default_factory=list)
    is_active: bool = False
    week_number: int


class WeekSummaryTotals(CamelModel):
    total_hours: Decimal = Decimal("0")
    total_sales: Decimal = Decimal("0")
    total_books: int = 0
    days_worked: int = 0
    average_hours_per_day: Decimal = Decimal("0")


class WeekSummaryReport(CamelModel):
    """End-of-week recap shown once the week reaches its cutoff."""

    student_name: str
    week_info: WorkWeekInfo
    daily_reports: list[DailyReport] = Field(default_factory=list)
    summary: WeekSummaryTotals = Field(default_factory=WeekSummaryTotals)
    generated_at: dt.datetime


class WeeklyPerformance(CamelModel):
    """Recent averages over the last four weeks plus lifetime ministry totals."""

    average_hours: Decimal = Decimal("0")
    average_sales: Decimal = Decimal("0")
    total_baptisms: int = 0
    total_bible_studies: int = 0
