"""S3 backend implementing IBackupStore.

Each backup is one JSON object under ``prefix``. Backup names embed a
``%Y%m%dT%H%M%S`` timestamp, so lexical key order is chronological.
"""

from __future__ import annotations

import boto3
from botocore.exceptions import ClientError

from canvassbook.core.exceptions import BackupNotFoundError, StorageError

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BackupStore:
    """IBackupStore backed by an S3 bucket (or LocalStack via ``endpoint_url``)."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, prefix: str = "backups/") -> None:
        self._bucket = bucket
        self._prefix = prefix
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    @property
    def prefix(self) -> str:
        return self._prefix

    def save(self, name: str, payload: str) -> str:
        key = f"{self._prefix}{name}"
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=payload.encode("utf-8"),
                ContentType="application/json",
            )
        except ClientError as exc:
            raise StorageError(f"S3 backup upload failed for {key!r}: {exc}") from exc
        return key

    def load(self, key: str) -> str:
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_CODES:
                raise BackupNotFoundError(key) from exc
            raise StorageError(f"S3 backup download failed for {key!r}: {exc}") from exc
        return resp["Body"].read().decode("utf-8")

    def list_keys(self) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
        except ClientError as exc:
            raise StorageError(f"S3 backup listing failed for prefix={self._prefix!r}: {exc}") from exc
        return sorted(keys)

    def latest(self) -> str | None:
        keys = self.list_keys()
        return keys[-1] if keys else None
