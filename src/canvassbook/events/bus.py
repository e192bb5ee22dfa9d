"""In-process change notifications for presentation layers."""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import StrEnum

from canvassbook.core.types import Listener, Unsubscribe

logger = logging.getLogger(__name__)


class ReportEvent(StrEnum):
    REPORTS_UPDATED = "reportsUpdated"
    PROFILE_UPDATED = "profileUpdated"
    SETTINGS_UPDATED = "settingsUpdated"
    AUTH_UPDATED = "authUpdated"
    DATA_CLEARED = "dataCleared"


class EventBus:
    """Synchronous publish/subscribe keyed by event name.

    Subscribers run on the publisher's thread in registration order. A
    subscriber that raises is logged and skipped; the publisher never sees it.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[object, Listener]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Listener) -> Unsubscribe:
        # Each registration gets its own handle, even for the same callback.
        token = object()
        self._listeners[event].append((token, callback))

        def unsubscribe() -> None:
            listeners = self._listeners.get(event, [])
            listeners[:] = [entry for entry in listeners if entry[0] is not token]

        return unsubscribe

    def publish(self, event: str) -> None:
        # Copy so callbacks may unsubscribe while being notified.
        for _, callback in list(self._listeners.get(event, ())):
            try:
                callback()
            except Exception:
                logger.exception("Subscriber for %r raised", str(event))
