"""ReportRepository — the service presentation layers talk to.

Owns the weekly and monthly collections, drives the aggregation engine after
every daily write, and publishes change notifications. Every mutator runs its
whole read-modify-write sequence under one ``asyncio.Lock``, so two rapid
saves cannot both read the same stale collection.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Iterable

from pydantic import ValidationError

from canvassbook.core.config import AppSettings
from canvassbook.core.exceptions import (
    BackupNotFoundError,
    CanvassbookError,
    InvalidSnapshotError,
    MissingProfileError,
    PersistenceError,
    StorageError,
    WeekLockedError,
)
from canvassbook.core.protocols import IBackupStore, IEventBus, IKeyValueStore
from canvassbook.core.types import Clock, WeekId
from canvassbook.engine import weeks
from canvassbook.engine.aggregation import ReportAggregator
from canvassbook.events.bus import ReportEvent
from canvassbook.models.analytics import WeeklyPerformance, WeekSummaryReport
from canvassbook.models.reports import DailyReport, MonthlyReport, WeeklyReport
from canvassbook.models.snapshot import REQUIRED_SNAPSHOT_KEYS, ExportSnapshot
from canvassbook.repository.daily_store import DailyReportStore
from canvassbook.repository.profile_store import ProfileStore
from canvassbook.repository.storage import JsonValue, StorageKeys, storage_boundary

logger = logging.getLogger(__name__)


class ReportRepository:
    """Daily/weekly/monthly report service over an IKeyValueStore."""

    def __init__(
        self,
        store: IKeyValueStore,
        bus: IEventBus,
        settings: AppSettings | None = None,
        *,
        clock: Clock = datetime.now,
    ) -> None:
        self._settings = settings or AppSettings()
        self._store = store
        self._bus = bus
        self._clock = clock
        self._keys = StorageKeys.with_prefix(self._settings.storage.key_prefix)
        self._aggregator = ReportAggregator(self._settings.calendar)
        self._lock = asyncio.Lock()
        self._initialized = False

        self.daily = DailyReportStore(store, self._keys)
        self.profiles = ProfileStore(store, self._keys, bus, clock=clock)
        self._weekly: JsonValue[list[WeeklyReport]] = JsonValue(
            store, self._keys.weekly_reports, list[WeeklyReport],
        )
        self._monthly: JsonValue[list[MonthlyReport]] = JsonValue(
            store, self._keys.monthly_reports, list[MonthlyReport],
        )
        self._version: JsonValue[str] = JsonValue(store, self._keys.data_version, str)
        self._last_sync: JsonValue[datetime] = JsonValue(store, self._keys.last_sync, datetime)

    @property
    def aggregator(self) -> ReportAggregator:
        return self._aggregator

    @property
    def bus(self) -> IEventBus:
        return self._bus

    def _now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Check the stored data-format version and record the sync time."""
        if self._initialized:
            return
        async with self._lock:
            if self._initialized:
                return
            current = self._settings.data_version
            with storage_boundary("initialize data store"):
                stored = await self._version.load()
                if stored != current:
                    await self._migrate(stored, current)
                    await self._version.save(current)
            await self._touch_last_sync()
            self._initialized = True

    async def _migrate(self, from_version: str | None, to_version: str) -> None:
        # No schema changes between released versions yet.
        logger.info("Migrating data from %s to %s", from_version or "unknown", to_version)

    async def _touch_last_sync(self) -> None:
        try:
            await self._last_sync.save(self._now())
        except StorageError as exc:
            logger.warning("Failed to update last sync time: %s", exc)

    async def last_sync(self) -> datetime | None:
        try:
            return await self._last_sync.load()
        except StorageError as exc:
            logger.warning("Failed to read last sync time: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Daily reports
    # ------------------------------------------------------------------

    async def save_daily(self, report: DailyReport) -> DailyReport:
        """Upsert one daily report, then rebuild every weekly report.

        Creating a report for a date in a locked week is refused while
        ``auto_lock_weeks`` is on; editing the report already stored for that
        date is always allowed. Moving a report by id onto a new date counts
        as creating that date. A failed rebuild is logged and does not fail
        the save.
        """
        async with self._lock:
            now = self._now()
            with storage_boundary("save daily report"):
                existing = await self.daily.find(report.id, report.date)
                on_date = await self.daily.get_by_date(report.date)
            settings = await self.profiles.get_settings()

            start = self._aggregator.week_start(report.date)
            if on_date is None and settings.auto_lock_weeks and self._aggregator.is_locked(start, now):
                raise WeekLockedError(start)

            stored = self._normalize_daily(report, existing, now)
            with storage_boundary("save daily report"):
                await self.daily.upsert(stored)
            await self._touch_last_sync()
            await self._rebuild_after_write()
            return stored

    def _normalize_daily(self, report: DailyReport, existing: DailyReport | None, now: datetime) -> DailyReport:
        data = report.model_dump()
        if not data["id"]:
            data["id"] = existing.id if existing else f"daily_{report.date.isoformat()}"
        if existing is not None and existing.created_at is not None:
            data["created_at"] = existing.created_at
        elif data["created_at"] is None:
            data["created_at"] = now
        data["updated_at"] = now
        # Re-validate so sale-line totals are derived from the final list.
        return DailyReport.model_validate(data)

    async def bulk_load_daily(self, reports: Iterable[DailyReport]) -> int:
        """Load historical entries without the lock check, then rebuild once."""
        async with self._lock:
            now = self._now()
            loaded = [self._normalize_daily(r, None, now) for r in reports]
            with storage_boundary("bulk save daily reports"):
                await self.daily.upsert_many(loaded)
            await self._touch_last_sync()
            await self._rebuild_after_write()
            return len(loaded)

    async def delete_daily(self, day: date) -> bool:
        async with self._lock:
            with storage_boundary("delete daily report"):
                removed = await self.daily.remove_date(day)
            if removed:
                await self._touch_last_sync()
                await self._rebuild_after_write()
            return removed

    async def get_daily(self, day: date) -> DailyReport | None:
        with storage_boundary("load daily report"):
            return await self.daily.get_by_date(day)

    async def list_daily(self) -> list[DailyReport]:
        with storage_boundary("load daily reports"):
            return await self.daily.list_all()

    async def list_daily_between(self, start: date, end: date) -> list[DailyReport]:
        return [r for r in await self.list_daily() if start <= r.date <= end]

    # ------------------------------------------------------------------
    # Weekly reports
    # ------------------------------------------------------------------

    async def rebuild_weekly(self) -> list[WeeklyReport]:
        async with self._lock:
            return await self._rebuild()

    async def _rebuild(self) -> list[WeeklyReport]:
        # Caller holds self._lock.
        now = self._now()
        profile = await self.profiles.get_user_profile()
        if profile is None:
            raise MissingProfileError()
        with storage_boundary("rebuild weekly reports"):
            daily = await self.daily.list_all()
            previous = await self._previous_weekly()
            rebuilt = self._aggregator.rebuild(daily, profile, previous, now=now)
            await self._weekly.save(rebuilt)
        logger.info("Weekly reports rebuilt: %d weeks from %d daily reports", len(rebuilt), len(daily))
        self._bus.publish(ReportEvent.REPORTS_UPDATED)
        return rebuilt

    async def _previous_weekly(self) -> list[WeeklyReport]:
        # Only creation times are reused, so an unreadable copy is not fatal.
        try:
            return await self._weekly.load() or []
        except StorageError as exc:
            logger.warning("Discarding unreadable weekly reports: %s", exc)
            return []

    async def _rebuild_after_write(self) -> None:
        try:
            await self._rebuild()
        except CanvassbookError as exc:
            logger.warning("Weekly rebuild failed (non-fatal): %s", exc)
            self._bus.publish(ReportEvent.REPORTS_UPDATED)

    async def list_weekly(self) -> list[WeeklyReport]:
        with storage_boundary("load weekly reports"):
            stored = await self._weekly.load() or []
        refreshed = self._aggregator.refresh_locks(stored, self._now())
        return sorted(refreshed, key=self._aggregator.sort_key)

    async def get_weekly(self, week_id: WeekId) -> WeeklyReport | None:
        for report in await self.list_weekly():
            if report.id == week_id:
                return report
        return None

    async def get_current_week(self, today: date | None = None) -> WeeklyReport | None:
        day = today or self._now().date()
        return await self.get_weekly(weeks.week_id(self._aggregator.week_start(day)))

    async def list_weekly_between(self, start: date, end: date) -> list[WeeklyReport]:
        return [r for r in await self.list_weekly() if start <= r.week_start_date <= end]

    # ------------------------------------------------------------------
    # Monthly reports
    # ------------------------------------------------------------------

    async def generate_monthly(self, month: int, year: int) -> MonthlyReport:
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1-12, got {month}")
        async with self._lock:
            now = self._now()
            profile = await self.profiles.get_user_profile()
            if profile is None:
                raise MissingProfileError()
            with storage_boundary("generate monthly report"):
                weekly = await self._weekly.load() or []
                report = self._aggregator.build_monthly(
                    month, year, self._aggregator.refresh_locks(weekly, now), profile, now=now,
                )
                existing = await self._monthly.load() or []
                monthly = [m for m in existing if m.id != report.id] + [report]
                monthly.sort(key=lambda m: (m.year, m.month))
                await self._monthly.save(monthly)
            await self._touch_last_sync()
        self._bus.publish(ReportEvent.REPORTS_UPDATED)
        return report

    async def list_monthly(self) -> list[MonthlyReport]:
        with storage_boundary("load monthly reports"):
            stored = await self._monthly.load() or []
        return sorted(stored, key=lambda m: (m.year, m.month))

    async def get_monthly(self, month: int, year: int) -> MonthlyReport | None:
        wanted = weeks.month_id(month, year)
        for report in await self.list_monthly():
            if report.id == wanted:
                return report
        return None

    # ------------------------------------------------------------------
    # Calendar views
    # ------------------------------------------------------------------

    async def missing_dates(self, today: date | None = None) -> list[date]:
        """Working dates since first use (or today) with no daily report."""
        today = today or self._now().date()
        settings = await self.profiles.get_settings()
        reported = {r.date for r in await self.list_daily()}
        first_weekday = self._aggregator.first_weekday

        missing: list[date] = []
        day = settings.first_use_date or today
        while day <= today:
            if weeks.is_working_day(day, first_weekday) and day not in reported:
                missing.append(day)
            day += timedelta(days=1)
        return missing

    def current_week_dates(self, today: date | None = None) -> list[date]:
        day = today or self._now().date()
        return weeks.working_dates_in_week(self._aggregator.week_start(day))

    async def week_summary(self, now: datetime | None = None) -> WeekSummaryReport:
        profile = await self.profiles.get_user_profile()
        return self._aggregator.build_week_summary(now or self._now(), await self.list_daily(), profile)

    async def weekly_performance(self) -> WeeklyPerformance:
        return self._aggregator.weekly_performance(await self.list_weekly())

    # ------------------------------------------------------------------
    # Export / import / clear
    # ------------------------------------------------------------------

    async def export_all(self) -> str:
        snapshot = ExportSnapshot(
            user_profile=await self.profiles.get_user_profile(),
            daily_reports=await self.list_daily(),
            weekly_reports=await self.list_weekly(),
            monthly_reports=await self.list_monthly(),
            settings=await self.profiles.get_settings(),
            last_sync=await self.last_sync(),
            export_date=self._now(),
            version=self._settings.data_version,
        )
        return snapshot.model_dump_json(by_alias=True, indent=2)

    def _parse_snapshot(self, payload: str | bytes | Mapping[str, Any]) -> ExportSnapshot:
        if isinstance(payload, (str, bytes)):
            try:
                raw = json.loads(payload)
            except ValueError as exc:
                raise InvalidSnapshotError("Invalid data format: not JSON") from exc
        else:
            raw = dict(payload)
        if not isinstance(raw, dict) or not all(raw.get(key) for key in REQUIRED_SNAPSHOT_KEYS):
            raise InvalidSnapshotError("Invalid data format: version and userProfile are required")
        try:
            return ExportSnapshot.model_validate(raw)
        except ValidationError as exc:
            raise InvalidSnapshotError(f"Invalid data format: {exc.error_count()} invalid fields") from exc

    async def import_all(self, payload: str | bytes | Mapping[str, Any]) -> ExportSnapshot:
        """Replace local data with a snapshot, then rebuild weekly reports.

        The snapshot is fully validated before anything is written. If a
        write fails, every key touched so far is put back to its prior value.
        """
        snapshot = self._parse_snapshot(payload)
        if snapshot.version != self._settings.data_version:
            await self._migrate(snapshot.version, self._settings.data_version)

        async with self._lock:
            affected = (
                self._keys.daily_reports,
                self._keys.weekly_reports,
                self._keys.monthly_reports,
                self._keys.user_profile,
                self._keys.settings,
            )
            with storage_boundary("import data"):
                previous = {key: await self._store.get(key) for key in affected}
            try:
                with storage_boundary("import data"):
                    await self.daily.replace_all(snapshot.daily_reports)
                    # Imported weekly reports only carry creation times into the rebuild.
                    await self._weekly.save(snapshot.weekly_reports)
                    await self._monthly.save(snapshot.monthly_reports)
                # Profile and settings go last so their events only follow a complete import.
                await self.profiles.save_user_profile(snapshot.user_profile)
                if snapshot.settings is not None:
                    await self.profiles.save_settings(snapshot.settings)
            except PersistenceError:
                await self._restore_raw(previous)
                raise
            await self._touch_last_sync()
            await self._rebuild()
        logger.info(
            "Imported %d daily and %d monthly reports (format %s)",
            len(snapshot.daily_reports), len(snapshot.monthly_reports), snapshot.version,
        )
        return snapshot

    async def _restore_raw(self, previous: Mapping[str, str | None]) -> None:
        for key, value in previous.items():
            try:
                if value is None:
                    await self._store.delete(key)
                else:
                    await self._store.set(key, value)
            except StorageError as exc:
                logger.error("Rollback of key %s failed: %s", key, exc)

    async def clear_all(self) -> None:
        """Remove all report collections. Profile and settings survive."""
        async with self._lock:
            with storage_boundary("clear data"):
                await self._store.delete(
                    self._keys.daily_reports,
                    self._keys.weekly_reports,
                    self._keys.monthly_reports,
                )
            await self._touch_last_sync()
        self._bus.publish(ReportEvent.DATA_CLEARED)
        self._bus.publish(ReportEvent.REPORTS_UPDATED)

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    async def backup(self, backups: IBackupStore) -> str:
        """Save the current export as a timestamped backup; returns its key."""
        payload = await self.export_all()
        now = self._now()
        try:
            key = await asyncio.to_thread(backups.save, f"canvassbook-{now:%Y%m%dT%H%M%S}.json", payload)
        except StorageError as exc:
            logger.error("Backup upload failed: %s", exc)
            raise PersistenceError("back up data") from exc
        await self.profiles.update_settings(last_backup=now)
        logger.info("Backup written to %s", key)
        return key

    async def list_backups(self, backups: IBackupStore) -> list[str]:
        try:
            return await asyncio.to_thread(backups.list_keys)
        except StorageError as exc:
            logger.error("Listing backups failed: %s", exc)
            raise PersistenceError("list backups") from exc

    async def restore_backup(self, backups: IBackupStore, key: str | None = None) -> ExportSnapshot:
        """Import a backup; the newest one when ``key`` is omitted."""
        try:
            if key is None:
                key = await asyncio.to_thread(backups.latest)
                if key is None:
                    raise InvalidSnapshotError("No backups found")
            payload = await asyncio.to_thread(backups.load, key)
        except BackupNotFoundError as exc:
            raise InvalidSnapshotError(f"No backup at {exc.key}") from exc
        except StorageError as exc:
            logger.error("Reading backup %s failed: %s", key, exc)
            raise PersistenceError("restore backup") from exc
        return await self.import_all(payload)
