"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class StorageConfig(BaseSettings):
    """Key/value store selection."""

    model_config = {"env_prefix": "CANVASSBOOK_STORAGE_"}

    backend: Literal["memory", "redis", "file"] = "file"
    key_prefix: str = "@canvassbook_"
    data_dir: Path = Path.home() / ".canvassbook"


class RedisConfig(BaseSettings):
    """Redis key/value store configuration."""

    model_config = {"env_prefix": "CANVASSBOOK_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0


class S3Config(BaseSettings):
    """S3 backup storage configuration."""

    model_config = {"env_prefix": "CANVASSBOOK_S3_"}

    enabled: bool = False
    bucket: str = "canvassbook-backups"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    prefix: str = "backups/"


class CalendarConfig(BaseSettings):
    """Canvassing week layout.

    ``first_weekday`` uses Python numbering (Monday=0 ... Sunday=6). The rest
    day is the weekday just before it.
    """

    model_config = {"env_prefix": "CANVASSBOOK_CALENDAR_"}

    first_weekday: int = Field(default=6, ge=0, le=6)
    cutoff_hour: int = Field(default=18, ge=0, le=23)


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "CANVASSBOOK_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    data_version: str = "2.1.0"

    storage: StorageConfig = StorageConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
    calendar: CalendarConfig = CalendarConfig()
