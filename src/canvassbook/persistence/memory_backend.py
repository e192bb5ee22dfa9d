"""In-memory backends for unit tests."""

from __future__ import annotations

from canvassbook.core.exceptions import BackupNotFoundError


class MemoryKeyValueStore:
    """Dict-backed IKeyValueStore for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._store.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._store)


class MemoryBackupStore:
    """IBackupStore holding JSON snapshots in a dict keyed by ``prefix + name``."""

    def __init__(self, prefix: str = "backups/") -> None:
        self._prefix = prefix
        self._backups: dict[str, str] = {}

    def save(self, name: str, payload: str) -> str:
        key = f"{self._prefix}{name}"
        self._backups[key] = payload
        return key

    def load(self, key: str) -> str:
        try:
            return self._backups[key]
        except KeyError:
            raise BackupNotFoundError(key) from None

    def list_keys(self) -> list[str]:
        return sorted(self._backups)

    def latest(self) -> str | None:
        keys = self.list_keys()
        return keys[-1] if keys else None
