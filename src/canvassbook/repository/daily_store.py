"""DailyReportStore — sole owner of the daily report collection."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from canvassbook.core.protocols import IKeyValueStore
from canvassbook.models.reports import DailyReport
from canvassbook.repository.storage import JsonValue, StorageKeys


def _one_per_date(reports: Iterable[DailyReport]) -> list[DailyReport]:
    """Keep the last report seen for each date, ordered by date."""
    by_date: dict[date, DailyReport] = {}
    for report in reports:
        by_date[report.date] = report
    return [by_date[day] for day in sorted(by_date)]


class DailyReportStore:
    """Raw daily reports, stored as one array with at most one entry per date.

    Raises StorageError on backend failures; callers wrap them.
    """

    def __init__(self, store: IKeyValueStore, keys: StorageKeys) -> None:
        self._reports: JsonValue[list[DailyReport]] = JsonValue(
            store, keys.daily_reports, list[DailyReport],
        )

    async def list_all(self) -> list[DailyReport]:
        return _one_per_date(await self._reports.load() or [])

    async def get_by_date(self, day: date) -> DailyReport | None:
        for report in await self.list_all():
            if report.date == day:
                return report
        return None

    async def find(self, report_id: str, day: date) -> DailyReport | None:
        """Existing report with the same id, else the one on the same date."""
        reports = await self.list_all()
        if report_id:
            for report in reports:
                if report.id == report_id:
                    return report
        for report in reports:
            if report.date == day:
                return report
        return None

    async def upsert(self, report: DailyReport) -> None:
        remaining = [
            r for r in await self.list_all()
            if r.date != report.date and not (report.id and r.id == report.id)
        ]
        await self.replace_all([*remaining, report])

    async def upsert_many(self, reports: Iterable[DailyReport]) -> None:
        await self.replace_all([*await self.list_all(), *reports])

    async def remove_date(self, day: date) -> bool:
        reports = await self.list_all()
        remaining = [r for r in reports if r.date != day]
        if len(remaining) == len(reports):
            return False
        await self.replace_all(remaining)
        return True

    async def replace_all(self, reports: Iterable[DailyReport]) -> None:
        await self._reports.save(_one_per_date(reports))
