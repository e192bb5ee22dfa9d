"""Tests for the FastAPI routes using TestClient over an in-memory store."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from canvassbook.api.app import create_app
from tests.fakes import FailingKeyValueStore, MemoryBackupStore, MemoryKeyValueStore

PROFILE = {"fullName": "Asha Mwita", "phoneNumber": "+255700111222"}


@pytest.fixture
def client(settings, clock):
    app = create_app(settings, store=MemoryKeyValueStore(), backup_store=MemoryBackupStore(), clock=clock)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_with_profile(client):
    assert client.put("/profile", json=PROFILE).status_code == 200
    return client


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready_reports_last_sync(self, client):
        body = client.get("/ready").json()
        assert body["status"] == "ready"
        assert body["last_sync"].startswith("2025-01-07T09:00")


class TestProfile:
    def test_missing_profile_is_404(self, client):
        assert client.get("/profile").status_code == 404

    def test_save_profile_records_first_use(self, client_with_profile):
        assert client_with_profile.get("/profile").json()["fullName"] == "Asha Mwita"
        assert client_with_profile.get("/settings").json()["firstUseDate"] == "2025-01-07"

    def test_patch_settings(self, client):
        resp = client.patch("/settings", json={"theme": "dark"})
        assert resp.status_code == 200
        assert resp.json()["theme"] == "dark"

    def test_patch_invalid_settings(self, client):
        assert client.patch("/settings", json={"theme": "purple"}).status_code == 422


class TestReports:
    def test_daily_entry_rolls_into_week(self, client_with_profile):
        client = client_with_profile
        resp = client.put("/reports/daily", json={
            "date": "2025-01-06",
            "hoursWorked": 8,
            "bookSales": [{"title": "Steps to Christ", "price": 1000, "quantity": 2}],
        })
        assert resp.status_code == 200
        assert resp.json()["booksSold"] == 2

        current = client.get("/reports/weekly/current").json()
        assert current["id"] == "week_2025-01-05"
        assert current["totalAmount"] == "2000"
        assert current["isLocked"] is False
        assert client.get("/reports/weekly/week_2025-01-05").status_code == 200
        assert client.get("/reports/daily/2025-01-06").json()["hoursWorked"] == "8"

    def test_locked_week_is_409(self, client_with_profile):
        resp = client_with_profile.put("/reports/daily", json={"date": "2025-01-03", "hoursWorked": 2})
        assert resp.status_code == 409
        assert resp.json() == {"detail": "This week is locked"}

    def test_delete_daily(self, client_with_profile):
        client = client_with_profile
        client.put("/reports/daily", json={"date": "2025-01-06", "hoursWorked": 8})
        assert client.delete("/reports/daily/2025-01-06").status_code == 204
        assert client.delete("/reports/daily/2025-01-06").status_code == 404
        assert client.get("/reports/weekly").json() == []

    def test_monthly_requires_profile(self, client):
        resp = client.post("/reports/monthly/2025/1")
        assert resp.status_code == 409

    def test_monthly_bad_month(self, client_with_profile):
        assert client_with_profile.post("/reports/monthly/2025/13").status_code == 422

    def test_monthly_generate(self, client_with_profile):
        client = client_with_profile
        client.put("/reports/daily", json={"date": "2025-01-06", "hoursWorked": 8})
        body = client.post("/reports/monthly/2025/1").json()
        assert body["id"] == "month_2025_1"
        assert len(client.get("/reports/monthly").json()) == 1

    def test_calendar_views(self, client_with_profile):
        client = client_with_profile
        assert client.get("/reports/missing-dates").json() == ["2025-01-07"]
        dates = client.get("/reports/current-week-dates").json()
        assert dates[0] == "2025-01-05" and len(dates) == 6
        summary = client.get("/reports/week-summary").json()
        assert summary["weekInfo"]["weekNumber"] == 2
        assert client.get("/reports/performance").status_code == 200


class TestData:
    def test_export_import_clear(self, client_with_profile):
        client = client_with_profile
        client.put("/reports/daily", json={"date": "2025-01-06", "hoursWorked": 8})
        snapshot = client.get("/data/export").json()
        assert client.delete("/data").status_code == 204
        assert client.get("/reports/daily").json() == []

        resp = client.post("/data/import", json=snapshot)
        assert resp.json() == {"dailyReports": 1, "monthlyReports": 0}
        assert len(client.get("/reports/weekly").json()) == 1

    def test_invalid_import_is_422(self, client):
        assert client.post("/data/import", json={"version": "2.1.0"}).status_code == 422

    def test_backups(self, client_with_profile):
        client = client_with_profile
        client.put("/reports/daily", json={"date": "2025-01-06", "hoursWorked": 8})
        key = client.post("/data/backups").json()["key"]
        assert key == "backups/canvassbook-20250107T090000.json"
        assert client.get("/data/backups").json() == [key]

        assert client.delete("/data").status_code == 204
        resp = client.post("/data/backups/restore")
        assert resp.json() == {"dailyReports": 1, "monthlyReports": 0}
        assert len(client.get("/reports/daily").json()) == 1

    def test_restore_unknown_backup_is_422(self, client_with_profile):
        resp = client_with_profile.post("/data/backups/restore", params={"key": "backups/nope.json"})
        assert resp.status_code == 422


def test_storage_failure_is_503(settings, clock):
    store = FailingKeyValueStore({"get"}, keys={"@canvassbook_daily_reports"})
    with TestClient(create_app(settings, store=store, clock=clock)) as client:
        resp = client.get("/reports/daily")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Could not save or load data"}


def test_backups_not_configured(settings, clock):
    with TestClient(create_app(settings, store=MemoryKeyValueStore(), clock=clock)) as client:
        assert client.get("/data/backups").status_code == 503
