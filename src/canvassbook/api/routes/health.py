"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from canvassbook.api.deps import get_repository
from canvassbook.repository.reports import ReportRepository

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(repository: ReportRepository = Depends(get_repository)) -> dict[str, str]:
    last_sync = await repository.last_sync()
    return {"status": "ready", "last_sync": last_sync.isoformat() if last_sync else ""}
