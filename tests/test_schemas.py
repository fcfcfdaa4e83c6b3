"""Tests for configuration schemas."""

import pytest
from pydantic import ValidationError

from bucketfs.objectstorage import S3ClientConfig
from bucketfs.schemas import FilesystemConfig


class TestFilesystemConfig:
    """Test directory emulation configuration."""

    def test_defaults(self):
        """Test configuration defaults."""
        config = FilesystemConfig()
        assert config.folder_suffix == "_$folder$"
        assert config.listing_length == 1000
        assert config.materialize_implicit_directories is True
        assert config.default_owner == ""
        assert config.default_group == ""
        assert config.default_mode == 0o777

    def test_suffix_with_separator_rejected(self):
        """Test that a marker suffix may not contain the separator."""
        with pytest.raises(ValidationError, match="path separator"):
            FilesystemConfig(folder_suffix="/.dir")

    def test_empty_suffix_rejected(self):
        """Test that an empty marker suffix is rejected."""
        with pytest.raises(ValidationError):
            FilesystemConfig(folder_suffix="")

    def test_listing_length_positive(self):
        """Test that the page size must be positive."""
        with pytest.raises(ValidationError):
            FilesystemConfig(listing_length=0)

    def test_frozen(self):
        """Test that configuration cannot change after construction."""
        config = FilesystemConfig()
        with pytest.raises(ValidationError):
            config.listing_length = 5


class TestS3ClientConfig:
    """Test S3 client configuration."""

    def test_defaults(self):
        """Test S3 configuration defaults."""
        config = S3ClientConfig()
        assert config.region_name == "us-east-1"
        assert config.access_key_id is None
        assert config.endpoint_url is None

    def test_extra_fields_forbidden(self):
        """Test that unknown fields are rejected."""
        with pytest.raises(ValidationError):
            S3ClientConfig(bucket="nope")

    def test_botocore_config_translation(self):
        """Test translation of tuning options into botocore settings."""
        config = S3ClientConfig(
            connect_timeout=5,
            read_timeout=30,
            max_pool_connections=16,
            max_attempts=7,
        )
        botocore_config = config.to_botocore_config()

        assert botocore_config.connect_timeout == 5
        assert botocore_config.read_timeout == 30
        assert botocore_config.max_pool_connections == 16
        assert botocore_config.retries == {"max_attempts": 7, "mode": "standard"}
