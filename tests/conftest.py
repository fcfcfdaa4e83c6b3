"""Test configuration and fixtures for bucketfs."""

import boto3
import pytest
from moto import mock_aws

from bucketfs.filesystem import ObjectUnderFileSystem
from bucketfs.objectstorage import (
    S3ClientConfig,
    S3ClientManager,
    S3ObjectStoreGateway,
)

BUCKET = "test-bucket"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Keep boto3 away from any real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def client_config():
    return S3ClientConfig(
        access_key_id="test_key",
        secret_access_key="test_secret",
        region_name="us-east-1",
    )


@pytest.fixture
def s3_client(aws_credentials):
    """Mocked S3 with an empty test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def gateway(s3_client, client_config):
    return S3ObjectStoreGateway(S3ClientManager(client_config), BUCKET)


@pytest.fixture
def fs(gateway):
    return ObjectUnderFileSystem(gateway)


@pytest.fixture
def put(s3_client):
    """Write an object straight into the mocked bucket."""

    def _put(key: str, body: bytes = b"") -> None:
        s3_client.put_object(Bucket=BUCKET, Key=key, Body=body)

    return _put


@pytest.fixture
def bucket_keys(s3_client):
    """Return every key currently in the mocked bucket."""

    def _keys() -> set[str]:
        paginator = s3_client.get_paginator("list_objects_v2")
        keys = set()
        for page in paginator.paginate(Bucket=BUCKET):
            for obj in page.get("Contents", []):
                keys.add(obj["Key"])
        return keys

    return _keys
