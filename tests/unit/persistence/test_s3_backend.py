"""Unit tests for S3BackupStore using moto."""

from __future__ import annotations

import boto3
import pytest
from moto import mock_aws

from canvassbook.core.exceptions import BackupNotFoundError, StorageError
from canvassbook.persistence.s3_backend import S3BackupStore

BUCKET = "test-canvassbook-backups"


@pytest.fixture
def s3_client():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def s3_backend(s3_client):
    return S3BackupStore(bucket=BUCKET, region="us-east-1")


class TestSave:
    def test_save_returns_prefixed_key(self, s3_backend):
        assert s3_backend.save("a.json", "{}") == "backups/a.json"

    def test_save_stores_json_object(self, s3_backend, s3_client):
        s3_backend.save("a.json", '{"version": "2.1.0"}')
        obj = s3_client.get_object(Bucket=BUCKET, Key="backups/a.json")
        assert obj["ContentType"] == "application/json"
        assert obj["Body"].read() == b'{"version": "2.1.0"}'


class TestLoad:
    def test_load_returns_text(self, s3_backend):
        key = s3_backend.save("a.json", '{"userProfile": {"fullName": "Asha Mwita"}}')
        assert s3_backend.load(key) == '{"userProfile": {"fullName": "Asha Mwita"}}'

    def test_missing_key_raises_backup_not_found(self, s3_backend):
        with pytest.raises(BackupNotFoundError) as info:
            s3_backend.load("backups/missing.json")
        assert info.value.key == "backups/missing.json"


class TestListing:
    def test_lists_only_own_prefix_in_order(self, s3_backend, s3_client):
        s3_backend.save("canvassbook-20250107T090000.json", "2")
        s3_backend.save("canvassbook-20250106T090000.json", "1")
        s3_client.put_object(Bucket=BUCKET, Key="other/three.json", Body=b"3")
        assert s3_backend.list_keys() == [
            "backups/canvassbook-20250106T090000.json",
            "backups/canvassbook-20250107T090000.json",
        ]
        assert s3_backend.latest() == "backups/canvassbook-20250107T090000.json"

    def test_empty_bucket_has_no_latest(self, s3_backend):
        assert s3_backend.list_keys() == []
        assert s3_backend.latest() is None

    def test_custom_prefix(self, s3_client):
        store = S3BackupStore(bucket=BUCKET, region="us-east-1", prefix="team-a/")
        assert store.save("x.json", "{}") == "team-a/x.json"
        assert store.list_keys() == ["team-a/x.json"]


def test_missing_bucket_raises_storage_error():
    with mock_aws():
        store = S3BackupStore(bucket="no-such-bucket", region="us-east-1")
        with pytest.raises(StorageError) as info:
            store.save("a.json", "{}")
        assert not isinstance(info.value, BackupNotFoundError)
