"""Protocol interfaces for canvassbook abstractions.

Repositories depend on these Protocols only; backends satisfy them
structurally, which keeps the in-memory fakes drop-in for tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from canvassbook.core.types import Listener, Unsubscribe


# ---------------------------------------------------------------------------
# Persistence: Key/Value Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IKeyValueStore(Protocol):
    """Opaque async key/value store holding one JSON document per key.

    ``set`` must replace the whole value in a single operation.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, *keys: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Backup Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IBackupStore(Protocol):
    """Named JSON export snapshots kept outside the device store.

    Keys sort oldest first when backup names carry a sortable timestamp.
    ``load`` raises BackupNotFoundError for an unknown key.
    """

    def save(self, name: str, payload: str) -> str: ...

    def load(self, key: str) -> str: ...

    def list_keys(self) -> list[str]: ...

    def latest(self) -> str | None: ...


# ---------------------------------------------------------------------------
# Change Notifications
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventBus(Protocol):
    """Synchronous in-process publish/subscribe."""

    def subscribe(self, event: str, callback: Listener) -> Unsubscribe: ...

    def publish(self, event: str) -> None: ...
