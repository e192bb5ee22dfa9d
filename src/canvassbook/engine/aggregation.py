"""ReportAggregator: derives weekly and monthly reports from daily entries.

The aggregator holds no state. Weekly reports are always rebuilt in full from
the complete daily collection, so a weekly total is exactly a function of the
current daily data no matter which past day was edited or deleted.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Sequence

from canvassbook.core.config import CalendarConfig
from canvassbook.core.exceptions import MissingProfileError
from canvassbook.engine import weeks
from canvassbook.models.analytics import (
    WeeklyPerformance,
    WeekSummaryReport,
    WeekSummaryTotals,
    WorkDay,
    WorkWeekInfo,
)
from canvassbook.models.profile import UserProfile
from canvassbook.models.reports import WEEKLY_TOTALS, DailyReport, MonthlyReport, WeeklyReport

logger = logging.getLogger(__name__)

PERFORMANCE_WINDOW = 4


def _require_profile(profile: UserProfile | None) -> UserProfile:
    if profile is None:
        raise MissingProfileError()
    return profile


def _sum(values: Iterable[int | Decimal]) -> int | Decimal:
    total: int | Decimal = 0
    for value in values:
        total += value
    return total


class ReportAggregator:
    """Pure transforms from daily -> weekly -> monthly reports."""

    def __init__(self, calendar: CalendarConfig | None = None) -> None:
        self._calendar = calendar or CalendarConfig()

    @property
    def first_weekday(self) -> int:
        return self._calendar.first_weekday

    @property
    def cutoff_hour(self) -> int:
        return self._calendar.cutoff_hour

    # ---- calendar shortcuts bound to the configured week layout ----

    def week_start(self, day: date | datetime) -> date:
        return weeks.week_start(day, self.first_weekday)

    def is_locked(self, week_start_date: date, now: datetime) -> bool:
        return weeks.is_locked(week_start_date, now, self.cutoff_hour)

    def week_number(self, week_start_date: date) -> int:
        return weeks.week_number(week_start_date, self.first_weekday)

    def sort_key(self, report: WeeklyReport) -> tuple[int, int, date]:
        return report.week_start_date.year, report.week_number, report.week_start_date

    # ---- weekly ----

    def group_by_week(self, daily_reports: Iterable[DailyReport]) -> dict[date, list[DailyReport]]:
        """Partition working-day entries by week start; rest-day entries are left out."""
        partitions: dict[date, list[DailyReport]] = defaultdict(list)
        for report in daily_reports:
            if not weeks.is_working_day(report.date, self.first_weekday):
                logger.debug("Skipping rest-day entry %s in weekly aggregation", report.date)
                continue
            partitions[self.week_start(report.date)].append(report)
        return dict(partitions)

    def build_weekly(
        self,
        week_start_date: date,
        daily_reports: Sequence[DailyReport],
        profile: UserProfile,
        *,
        now: datetime,
        created_at: datetime | None = None,
    ) -> WeeklyReport:
        ordered = sorted(daily_reports, key=lambda r: r.date)
        totals = {
            total_field: _sum(getattr(r, daily_field) for r in ordered)
            for total_field, daily_field in WEEKLY_TOTALS.items()
        }
        return WeeklyReport(
            id=weeks.week_id(week_start_date),
            week_number=self.week_number(week_start_date),
            week_start_date=week_start_date,
            week_end_date=weeks.last_working_date(week_start_date),
            student_name=profile.full_name,
            phone_number=profile.phone_number,
            daily_reports=ordered,
            is_locked=self.is_locked(week_start_date, now),
            created_at=created_at or now,
            updated_at=now,
            **totals,
        )

    def rebuild(
        self,
        daily_reports: Iterable[DailyReport],
        profile: UserProfile | None,
        previous: Iterable[WeeklyReport] = (),
        *,
        now: datetime,
    ) -> list[WeeklyReport]:
        """Recompute every weekly report from the full daily collection.

        ``previous`` only contributes first-seen ``created_at`` timestamps.
        """
        owner = _require_profile(profile)
        first_seen = {report.id: report.created_at for report in previous}
        rebuilt = [
            self.build_weekly(
                start,
                partition,
                owner,
                now=now,
                created_at=first_seen.get(weeks.week_id(start)),
            )
            for start, partition in self.group_by_week(daily_reports).items()
        ]
        rebuilt.sort(key=self.sort_key)
        logger.debug("Rebuilt %d weekly reports", len(rebuilt))
        return rebuilt

    def refresh_locks(self, weekly_reports: Iterable[WeeklyReport], now: datetime) -> list[WeeklyReport]:
        refreshed = []
        for report in weekly_reports:
            locked = self.is_locked(report.week_start_date, now)
            if locked != report.is_locked:
                report = report.model_copy(update={"is_locked": locked})
            refreshed.append(report)
        return refreshed

    # ---- monthly ----

    def build_monthly(
        self,
        month: int,
        year: int,
        weekly_reports: Iterable[WeeklyReport],
        profile: UserProfile | None,
        *,
        now: datetime,
    ) -> MonthlyReport:
        """Sum the weeks whose start date falls in (month, year).

        A week crossing into the next month stays with its start month.
        """
        owner = _require_profile(profile)
        in_month = sorted(
            (
                r for r in weekly_reports
                if r.week_start_date.month == month and r.week_start_date.year == year
            ),
            key=self.sort_key,
        )
        totals = {
            total_field: _sum(getattr(r, total_field) for r in in_month)
            for total_field in WEEKLY_TOTALS
        }
        ministry = (
            totals["total_bible_studies"]
            + totals["total_prayers_offered"]
            + totals["total_baptisms_performed"]
        )
        return MonthlyReport(
            id=weeks.month_id(month, year),
            month=month,
            year=year,
            student_name=owner.full_name,
            phone_number=owner.phone_number,
            weekly_reports=in_month,
            total_ministry_activities=ministry,
            created_at=now,
            **totals,
        )

    # ---- summaries ----

    def build_week_summary(
        self,
        now: datetime,
        daily_reports: Iterable[DailyReport],
        profile: UserProfile | None,
    ) -> WeekSummaryReport:
        owner = _require_profile(profile)
        today = now.date()
        start = weeks.calendar_week_start(today, self.first_weekday)
        working = weeks.working_dates_in_week(start)
        in_week = sorted((r for r in daily_reports if r.date in working), key=lambda r: r.date)
        completed = {r.date for r in in_week}

        total_hours = _sum(r.hours_worked for r in in_week)
        days_worked = len(in_week)
        average = Decimal(total_hours) / days_worked if days_worked else Decimal("0")

        info = WorkWeekInfo(
            week_start_date=start,
            week_end_date=weeks.last_working_date(start),
            work_days=[
                WorkDay(
                    date=day,
                    day_name=weeks.day_name(day),
                    is_today=day == today,
                    is_completed=day in completed,
                )
                for day in working
            ],
            is_active=not self.is_locked(start, now),
            week_number=self.week_number(start),
        )
        return WeekSummaryReport(
            student_name=owner.full_name,
            week_info=info,
            daily_reports=in_week,
            summary=WeekSummaryTotals(
                total_hours=total_hours,
                total_sales=_sum(r.daily_amount for r in in_week),
                total_books=_sum(r.books_sold for r in in_week),
                days_worked=days_worked,
                average_hours_per_day=average,
            ),
            generated_at=now,
        )

    def weekly_performance(self, weekly_reports: Sequence[WeeklyReport]) -> WeeklyPerformance:
        ordered = sorted(weekly_reports, key=self.sort_key)
        recent = ordered[-PERFORMANCE_WINDOW:]
        divisor = len(recent) or 1
        return WeeklyPerformance(
            average_hours=Decimal(_sum(r.total_hours for r in recent)) / divisor,
            average_sales=Decimal(_sum(r.total_amount for r in recent)) / divisor,
            total_baptisms=_sum(r.total_baptisms_performed for r in ordered),
            total_bible_studies=_sum(r.total_bible_studies for r in ordered),
        )
