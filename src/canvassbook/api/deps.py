"""Request dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request

from canvassbook.core.protocols import IBackupStore
from canvassbook.repository.reports import ReportRepository


def get_repository(request: Request) -> ReportRepository:
    return request.app.state.repository


def get_backup_store(request: Request) -> IBackupStore:
    backup_store = request.app.state.backup_store
    if backup_store is None:
        raise HTTPException(status_code=503, detail="Backups are not configured")
    return backup_store
