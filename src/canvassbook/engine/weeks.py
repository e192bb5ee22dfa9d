"""Calendar helpers for canvassing weeks.

A canvassing week is six working days beginning on ``first_weekday``; the
seventh day is the rest day. Weekdays use Python numbering (Monday=0).
All comparisons are on calendar dates, never instants.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from canvassbook.core.types import MonthId, WeekId

SUNDAY = 6
CUTOFF_HOUR = 18
WORKING_DAYS = 6

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def as_date(value: date | datetime) -> date:
    """Drop any time component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(day: date | datetime, first_weekday: int = SUNDAY) -> date:
    """First day of the canvassing week ``day`` belongs to.

    For working days this is the most recent ``first_weekday`` on or before
    ``day``. The rest day leads into the following week.
    """
    day = as_date(day)
    if day.weekday() == rest_weekday(first_weekday):
        return day + timedelta(days=1)
    back = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=back)


def calendar_week_start(day: date | datetime, first_weekday: int = SUNDAY) -> date:
    """Start of the week in progress or, on the rest day, the one just finished."""
    day = as_date(day)
    back = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=back)


def week_end(week_start_date: date, cutoff_hour: int = CUTOFF_HOUR) -> datetime:
    """Cutoff instant of the week: last working day at ``cutoff_hour``."""
    last_day = week_start_date + timedelta(days=WORKING_DAYS - 1)
    return datetime.combine(last_day, time(hour=cutoff_hour))


def last_working_date(week_start_date: date) -> date:
    return week_start_date + timedelta(days=WORKING_DAYS - 1)


def is_locked(week_start_date: date, now: datetime, cutoff_hour: int = CUTOFF_HOUR) -> bool:
    return now >= week_end(week_start_date, cutoff_hour)


def week_number(week_start_date: date, first_weekday: int = SUNDAY) -> int:
    """Week of the year, counting the week that holds January 1st as week 1.

    Derived from the day of year so the same calendar week always gets the
    same number regardless of when its record was built. A week is numbered
    in the year of its start date.
    """
    jan_first = date(week_start_date.year, 1, 1)
    offset = (jan_first.weekday() - first_weekday) % 7
    day_of_year = week_start_date.timetuple().tm_yday
    return (day_of_year - 1 + offset) // 7 + 1


def working_dates_in_week(week_start_date: date) -> list[date]:
    return [week_start_date + timedelta(days=i) for i in range(WORKING_DAYS)]


def rest_weekday(first_weekday: int = SUNDAY) -> int:
    return (first_weekday - 1) % 7


def is_working_day(day: date, first_weekday: int = SUNDAY) -> bool:
    return day.weekday() != rest_weekday(first_weekday)


def week_id(week_start_date: date) -> WeekId:
    return f"week_{week_start_date.isoformat()}"


def month_id(month: int, year: int) -> MonthId:
    return f"month_{year}_{month}"


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]
