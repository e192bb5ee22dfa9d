"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from canvassbook.api.routes import data, health, profile, reports
from canvassbook.core.config import AppSettings
from canvassbook.core.exceptions import (
    InvalidSnapshotError,
    MissingProfileError,
    PersistenceError,
    WeekLockedError,
)
from canvassbook.core.log import configure_logging
from canvassbook.core.protocols import IBackupStore, IKeyValueStore
from canvassbook.core.types import Clock
from canvassbook.persistence import create_backup_store, create_store
from canvassbook.persistence.redis_backend import RedisKeyValueStore
from canvassbook.repository import create_repository

# Generic, user-facing messages; details stay in the logs.
_ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    MissingProfileError: (409, "Create a profile before generating reports"),
    WeekLockedError: (409, "This week is locked"),
    InvalidSnapshotError: (422, "Invalid data format"),
    PersistenceError: (503, "Could not save or load data"),
}


def create_app(
    settings: AppSettings | None = None,
    *,
    store: IKeyValueStore | None = None,
    backup_store: IBackupStore | None = None,
    clock: Clock = datetime.now,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or AppSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        configure_logging(settings.log_level)
        kv_store = store if store is not None else create_store(settings)
        repository = create_repository(settings, store=kv_store, clock=clock)
        await repository.initialize()
        app.state.settings = settings
        app.state.repository = repository
        if backup_store is None and settings.s3.enabled:
            app.state.backup_store = create_backup_store(settings)
        else:
            app.state.backup_store = backup_store
        yield
        if isinstance(kv_store, RedisKeyValueStore):
            await kv_store.close()

    app = FastAPI(
        title="Canvassbook Report Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    for exc_type, (status, message) in _ERROR_RESPONSES.items():
        app.add_exception_handler(exc_type, _error_handler(status, message))

    app.include_router(health.router)
    app.include_router(reports.router, prefix="/reports")
    app.include_router(profile.router)
    app.include_router(data.router, prefix="/data")
    return app


def _error_handler(status: int, message: str):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status, content={"detail": message})

    return handler
