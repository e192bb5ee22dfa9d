"""Local JSON file backend implementing IKeyValueStore.

One file per key. Writes go to a temp file in the same directory and are
moved into place with ``os.replace`` so readers see either the old or the new
value, never a partial one.
"""

from __future__ import annotations

import asyncio
import os
import re
import tempfile
from pathlib import Path

from canvassbook.core.exceptions import StorageError

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileKeyValueStore:
    """IKeyValueStore persisted as files under ``directory``."""

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE.sub('_', key)}.json"

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def delete(self, *keys: str) -> None:
        await asyncio.to_thread(self._remove, keys)

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"File read failed for key={key!r}: {exc}") from exc

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"File write failed for key={key!r}: {exc}") from exc

    def _remove(self, keys: tuple[str, ...]) -> None:
        for key in keys:
            try:
                self.path_for(key).unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"File delete failed for key={key!r}: {exc}") from exc
