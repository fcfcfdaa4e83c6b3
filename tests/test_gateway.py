"""Tests for the S3 object store gateway."""

from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from bucketfs.core.exceptions import ServiceError, ValidationError
from bucketfs.objectstorage import S3ClientManager, S3ObjectStoreGateway

BUCKET = "test-bucket"


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestS3ObjectStoreGateway:
    """Test single-key operations against mocked S3."""

    def test_root_key(self, gateway):
        assert gateway.root_key == f"s3://{BUCKET}"

    def test_put_and_metadata(self, gateway):
        """Test that a put object reports its length."""
        gateway.put_object("data/file1.txt", b"content1")

        metadata = gateway.get_object_metadata("data/file1.txt")
        assert metadata is not None
        assert metadata.content_length == 8
        assert metadata.last_modified_ms > 0

    def test_zero_length_put(self, gateway):
        """Test a folder-marker style empty object."""
        gateway.put_object("data_$folder$", b"", content_length=0)

        metadata = gateway.get_object_metadata("data_$folder$")
        assert metadata.content_length == 0

    def test_metadata_missing_key(self, gateway):
        """Test that a missing key is reported as None, not an error."""
        assert gateway.get_object_metadata("nonexistent") is None

    def test_copy_and_delete(self, gateway, put):
        """Test server-side copy followed by delete."""
        put("src.txt", b"payload")

        gateway.copy_object("src.txt", "dst.txt")
        gateway.delete_object("src.txt")

        assert gateway.get_object_metadata("src.txt") is None
        assert gateway.get_object("dst.txt").read() == b"payload"

    def test_copy_missing_source(self, gateway):
        """Test that copying a missing key is a service failure."""
        with pytest.raises(ServiceError, match="Failed to copy"):
            gateway.copy_object("missing.txt", "dst.txt")

    def test_list_with_delimiter(self, gateway, put):
        """Test one-level listing with subdirectories as common prefixes."""
        put("data/file1.txt")
        put("data/2023/file2.txt")
        put("data/2024/file3.txt")

        page = gateway.list_objects("data/", delimiter="/")

        assert [obj.key for obj in page.objects] == ["data/file1.txt"]
        assert sorted(page.common_prefixes) == ["data/2023/", "data/2024/"]
        assert page.truncated is False

    def test_list_recursive(self, gateway, put):
        """Test flat listing without a delimiter."""
        put("data/file1.txt")
        put("data/2023/file2.txt")

        page = gateway.list_objects("data/")

        assert sorted(obj.key for obj in page.objects) == [
            "data/2023/file2.txt",
            "data/file1.txt",
        ]
        assert page.common_prefixes == []

    def test_list_truncated(self, gateway, put):
        """Test that a bounded page reports a continuation token."""
        for i in range(3):
            put(f"data/file{i}.txt")

        page = gateway.list_objects("data/", max_keys=2)

        assert len(page.objects) == 2
        assert page.truncated is True
        assert page.continuation_token

        rest = gateway.list_objects(
            "data/", max_keys=2, continuation_token=page.continuation_token
        )
        assert [obj.key for obj in rest.objects] == ["data/file2.txt"]
        assert rest.truncated is False


class TestGatewayErrorTranslation:
    """Test conversion of botocore errors into ServiceError."""

    def setup_method(self, method):
        self.client = Mock()
        manager = Mock(spec=S3ClientManager)
        manager.client = self.client
        self.gateway = S3ObjectStoreGateway(manager, BUCKET)

    def test_head_access_denied(self):
        """Test that non-404 metadata errors are service failures."""
        self.client.head_object.side_effect = _client_error("403", "HeadObject")

        with pytest.raises(ServiceError):
            self.gateway.get_object_metadata("key")

    def test_head_not_found_codes(self):
        """Test that every not-found code maps to None."""
        for code in ("404", "NoSuchKey", "NotFound"):
            self.client.head_object.side_effect = _client_error(code, "HeadObject")
            assert self.gateway.get_object_metadata("key") is None

    def test_connection_failure(self):
        """Test that transport errors are service failures."""
        self.client.list_objects_v2.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:9000"
        )

        with pytest.raises(ServiceError, match="Failed to list"):
            self.gateway.list_objects("data/")

    def test_delete_failure(self):
        self.client.delete_object.side_effect = _client_error(
            "InternalError", "DeleteObject"
        )

        with pytest.raises(ServiceError, match="Failed to delete"):
            self.gateway.delete_object("key")

    def test_list_omits_empty_parameters(self):
        """Test that empty prefix and delimiter are not sent."""
        self.client.list_objects_v2.return_value = {"IsTruncated": False}

        page = self.gateway.list_objects("", delimiter="", max_keys=5)

        self.client.list_objects_v2.assert_called_once_with(Bucket=BUCKET, MaxKeys=5)
        assert page.is_empty


class TestParseS3Path:
    """Test S3 URI parsing."""

    def test_bucket_and_prefix(self):
        assert S3ClientManager.parse_s3_path("s3://bucket/a/b") == ("bucket", "a/b")

    def test_bucket_only(self):
        assert S3ClientManager.parse_s3_path("s3://bucket") == ("bucket", "")

    def test_wrong_scheme(self):
        with pytest.raises(ValidationError, match="must start with"):
            S3ClientManager.parse_s3_path("gs://bucket/a")

    def test_missing_bucket(self):
        with pytest.raises(ValidationError, match="missing bucket"):
            S3ClientManager.parse_s3_path("s3:///a")
