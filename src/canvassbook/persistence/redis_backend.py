"""Redis backend implementing IKeyValueStore."""

from __future__ import annotations

import redis.asyncio as aioredis

from canvassbook.core.exceptions import StorageError


class RedisKeyValueStore:
    """IKeyValueStore backed by Redis. Each value is a single string key."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._client = aioredis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except Exception as exc:
            raise StorageError(f"Redis GET failed for key={key!r}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value)
        except Exception as exc:
            raise StorageError(f"Redis SET failed for key={key!r}: {exc}") from exc

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._client.delete(*keys)
        except Exception as exc:
            raise StorageError(f"Redis DELETE failed for keys={keys!r}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
