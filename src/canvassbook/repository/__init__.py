"""Report repository wiring."""

from __future__ import annotations

from datetime import datetime

from canvassbook.core.config import AppSettings
from canvassbook.core.protocols import IEventBus, IKeyValueStore
from canvassbook.core.types import Clock
from canvassbook.events.bus import EventBus
from canvassbook.persistence import create_store
from canvassbook.repository.reports import ReportRepository


def create_repository(
    settings: AppSettings | None = None,
    *,
    store: IKeyValueStore | None = None,
    bus: IEventBus | None = None,
    clock: Clock = datetime.now,
) -> ReportRepository:
    """Create a repository with its store and event bus from settings.

    Returns:
        A ReportRepository; call ``initialize()`` before first use.
    """
    if settings is None:
        settings = AppSettings()

    return ReportRepository(
        store if store is not None else create_store(settings),
        bus if bus is not None else EventBus(),
        settings,
        clock=clock,
    )
