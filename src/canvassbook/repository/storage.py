"""Typed JSON values on top of an IKeyValueStore."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, fields
from typing import Any, Generic, Iterator, TypeVar

from pydantic import TypeAdapter, ValidationError

from canvassbook.core.exceptions import PersistenceError, StorageError
from canvassbook.core.protocols import IKeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StorageKeys:
    """Store keys, one JSON document each."""

    daily_reports: str
    weekly_reports: str
    monthly_reports: str
    user_profile: str
    settings: str
    data_version: str
    last_sync: str

    @classmethod
    def with_prefix(cls, prefix: str) -> StorageKeys:
        return cls(**{f.name: f"{prefix}{f.name}" for f in fields(cls)})


@contextmanager
def storage_boundary(operation: str) -> Iterator[None]:
    """Log a backend failure and re-raise it as PersistenceError(operation)."""
    try:
        yield
    except StorageError as exc:
        logger.error("Storage failure during %s: %s", operation, exc)
        raise PersistenceError(operation) from exc


class JsonValue(Generic[T]):
    """One key holding a JSON document validated as ``type_``.

    ``save`` always writes the whole value, so a replace is a single store
    operation.
    """

    def __init__(self, store: IKeyValueStore, key: str, type_: Any) -> None:
        self._store = store
        self._key = key
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> T | None:
        raw = await self._store.get(self._key)
        if raw is None:
            return None
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Corrupt value at key={self._key!r}: {exc}") from exc

    async def save(self, value: T) -> None:
        payload = self._adapter.dump_json(value, by_alias=True)
        await self._store.set(self._key, payload.decode("utf-8"))
