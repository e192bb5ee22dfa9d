"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from canvassbook.core.config import AppSettings
from canvassbook.core.protocols import IBackupStore, IKeyValueStore
from canvassbook.persistence.file_backend import JsonFileKeyValueStore
from canvassbook.persistence.memory_backend import MemoryKeyValueStore
from canvassbook.persistence.redis_backend import RedisKeyValueStore
from canvassbook.persistence.s3_backend import S3BackupStore


def create_store(settings: AppSettings | None = None) -> IKeyValueStore:
    """Create the key/value store selected by ``settings.storage.backend``."""
    if settings is None:
        settings = AppSettings()

    backend = settings.storage.backend
    if backend == "redis":
        return RedisKeyValueStore(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
        )
    if backend == "memory":
        return MemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.storage.data_dir)


def create_backup_store(settings: AppSettings | None = None) -> IBackupStore:
    """Create the S3 store used for export backups."""
    if settings is None:
        settings = AppSettings()

    return S3BackupStore(
        bucket=settings.s3.bucket,
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
        prefix=settings.s3.prefix,
    )
