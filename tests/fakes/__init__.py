"""Shared test doubles — memory backends plus failure and timing fakes."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from canvassbook.core.exceptions import StorageError
from canvassbook.persistence.memory_backend import MemoryBackupStore, MemoryKeyValueStore

# Tuesday of the week that starts Sunday 2025-01-05 and locks Friday 18:00.
TUESDAY_MORNING = datetime(2025, 1, 7, 9, 0)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingKeyValueStore(MemoryKeyValueStore):
    """Raises StorageError for chosen operations, optionally only on some keys."""

    def __init__(self, fail_on: set[str], keys: set[str] | None = None) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.keys_to_fail = keys

    def _check(self, op: str, key: str) -> None:
        if op in self.fail_on and (self.keys_to_fail is None or key in self.keys_to_fail):
            raise StorageError(f"simulated {op} failure for {key!r}")

    async def get(self, key: str) -> str | None:
        self._check("get", key)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        self._check("set", key)
        await super().set(key, value)

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._check("delete", key)
        await super().delete(*keys)


class YieldingKeyValueStore(MemoryKeyValueStore):
    """Suspends on every call so concurrent coroutines interleave."""

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)


__all__ = [
    "TUESDAY_MORNING",
    "FailingKeyValueStore",
    "FrozenClock",
    "MemoryBackupStore",
    "MemoryKeyValueStore",
    "YieldingKeyValueStore",
]
