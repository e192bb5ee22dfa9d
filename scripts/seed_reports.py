"""Seed a store with a sample profile and several weeks of daily reports.

Usage:
    python scripts/seed_reports.py --backend file --data-dir ./data --weeks 4
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from canvassbook.core.config import AppSettings
from canvassbook.core.log import configure_logging
from canvassbook.engine import weeks
from canvassbook.models.profile import UserProfile
from canvassbook.models.reports import BookSale, DailyReport
from canvassbook.repository import create_repository
from canvassbook.repository.reports import ReportRepository

SAMPLE_TITLES: list[tuple[str, Decimal]] = [
    ("Steps to Christ", Decimal("3000")),
    ("The Great Controversy", Decimal("12000")),
    ("Health and Happiness", Decimal("5000")),
]


def sample_daily_reports(first_week_start: date, week_count: int) -> list[DailyReport]:
    """Deterministic daily entries for every working day of ``week_count`` weeks."""
    reports: list[DailyReport] = []
    for week in range(week_count):
        start = first_week_start + timedelta(days=7 * week)
        for offset, day in enumerate(weeks.working_dates_in_week(start)):
            title, price = SAMPLE_TITLES[(week + offset) % len(SAMPLE_TITLES)]
            reports.append(
                DailyReport(
                    date=day,
                    hours_worked=Decimal(6 + offset % 3),
                    book_sales=[BookSale(id=f"sale_{day.isoformat()}", title=title, price=price, quantity=1 + offset % 2)],
                    free_literature=offset,
                    people_visited=10 + offset,
                    prayers_offered=offset % 3,
                    bible_studies=1 if offset == 2 else 0,
                )
            )
    return reports


async def seed(repository: ReportRepository, *, full_name: str, phone: str,
               week_count: int, today: date) -> int:
    """Create the profile and load ``week_count`` weeks ending with the current one."""
    await repository.initialize()
    await repository.profiles.save_user_profile(
        UserProfile(id="profile_seed", full_name=full_name, phone_number=phone),
    )
    current_start = repository.aggregator.week_start(today)
    first_start = current_start - timedelta(days=7 * (week_count - 1))
    await repository.profiles.set_first_use_date(first_start)
    reports = [r for r in sample_daily_reports(first_start, week_count) if r.date <= today]
    return await repository.bulk_load_daily(reports)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed canvassbook with sample reports")
    parser.add_argument("--backend", choices=["file", "redis"], default="file", help="Store backend")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory for the file backend")
    parser.add_argument("--weeks", type=int, default=4, help="Number of weeks to generate")
    parser.add_argument("--name", default="Sample Canvasser", help="Profile full name")
    parser.add_argument("--phone", default="+255700000000", help="Profile phone number")
    args = parser.parse_args()

    settings = AppSettings()
    settings.storage.backend = args.backend
    if args.data_dir is not None:
        settings.storage.data_dir = args.data_dir
    configure_logging(settings.log_level)

    repository = create_repository(settings)
    count = asyncio.run(
        seed(repository, full_name=args.name, phone=args.phone, week_count=args.weeks, today=date.today()),
    )
    print(f"Seeded {count} daily reports")


if __name__ == "__main__":
    main()
