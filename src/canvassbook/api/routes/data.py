"""Data management endpoints: export, import, clear and backups."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response

from canvassbook.api.deps import get_backup_store, get_repository
from canvassbook.core.protocols import IBackupStore
from canvassbook.repository.reports import ReportRepository

router = APIRouter(tags=["data"])


@router.get("/export")
async def export_data(repository: ReportRepository = Depends(get_repository)) -> Response:
    payload = await repository.export_all()
    return Response(content=payload, media_type="application/json")


@router.post("/import")
async def import_data(
    snapshot: dict[str, Any] = Body(...),
    repository: ReportRepository = Depends(get_repository),
) -> dict[str, int]:
    imported = await repository.import_all(snapshot)
    return {
        "dailyReports": len(imported.daily_reports),
        "monthlyReports": len(imported.monthly_reports),
    }


@router.delete("", status_code=204)
async def clear_data(repository: ReportRepository = Depends(get_repository)) -> None:
    await repository.clear_all()


@router.post("/backups")
async def create_backup(
    repository: ReportRepository = Depends(get_repository),
    backup_store: IBackupStore = Depends(get_backup_store),
) -> dict[str, str]:
    return {"key": await repository.backup(backup_store)}


@router.get("/backups")
async def list_backups(
    repository: ReportRepository = Depends(get_repository),
    backup_store: IBackupStore = Depends(get_backup_store),
) -> list[str]:
    return await repository.list_backups(backup_store)


@router.post("/backups/restore")
async def restore_backup(
    key: str | None = None,
    repository: ReportRepository = Depends(get_repository),
    backup_store: IBackupStore = Depends(get_backup_store),
) -> dict[str, int]:
    restored = await repository.restore_backup(backup_store, key)
    return {
        "dailyReports": len(restored.daily_reports),
        "monthlyReports": len(restored.monthly_reports),
    }
