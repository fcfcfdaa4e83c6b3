"""Single-key object store operations that the filesystem layer is built on.

Every method here maps onto exactly one store request and is atomic at the
level of that one object. Failures of the store surface as ``ServiceError``;
the only "not found" that is reported as a value is a missing object on a
metadata lookup.
"""

from typing import Any, BinaryIO, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from bucketfs.core import get_logger
from bucketfs.core.exceptions import ServiceError
from bucketfs.objectstorage.clients import S3ClientManager
from bucketfs.objectstorage.clients.s3_client import S3_SCHEME
from bucketfs.objectstorage.models import ListingPage, ObjectMetadata, ObjectSummary

logger = get_logger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class ObjectStoreGateway(Protocol):
    """Protocol for the flat key/blob operations of an object store."""

    @property
    def root_key(self) -> str:
        """URI of the store root, e.g. ``s3://bucket``."""
        ...

    def put_object(
        self, key: str, body: bytes = b"", content_length: Optional[int] = None
    ) -> None: ...

    def get_object_metadata(self, key: str) -> Optional[ObjectMetadata]: ...

    def get_object(self, key: str) -> Any: ...

    def upload_fileobj(self, fileobj: BinaryIO, key: str) -> None: ...

    def delete_object(self, key: str) -> None: ...

    def copy_object(self, src_key: str, dst_key: str) -> None: ...

    def list_objects(
        self,
        prefix: str,
        delimiter: str = "",
        max_keys: int = 1000,
        continuation_token: Optional[str] = None,
    ) -> ListingPage: ...


class S3ObjectStoreGateway:
    """Object store gateway backed by a boto3 S3 client."""

    def __init__(self, client_manager: S3ClientManager, bucket: str):
        """Initialize the gateway.

        Args:
            client_manager: Manager owning the shared boto3 client
            bucket: Name of the bucket every key is relative to
        """
        self.client_manager = client_manager
        self.bucket = bucket
        logger.info("S3 gateway initialized", bucket=bucket)

    @property
    def root_key(self) -> str:
        return f"{S3_SCHEME}{self.bucket}"

    @property
    def client(self):
        return self.client_manager.client

    def put_object(
        self, key: str, body: bytes = b"", content_length: Optional[int] = None
    ) -> None:
        """Store ``body`` under ``key``, replacing any existing object."""
        if content_length is None:
            content_length = len(body)
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=key, Body=body, ContentLength=content_length
            )
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(f"Failed to put object '{key}': {e}") from e

    def get_object_metadata(self, key: str) -> Optional[ObjectMetadata]:
        """Return metadata for ``key``, or None when no such object exists."""
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return None
            raise ServiceError(f"Failed to get metadata of '{key}': {e}") from e
        except BotoCoreError as e:
            raise ServiceError(f"Failed to get metadata of '{key}': {e}") from e

        return ObjectMetadata(
            content_length=response.get("ContentLength", 0),
            last_modified=response["LastModified"],
        )

    def get_object(self, key: str) -> Any:
        """Return the streaming body of ``key``."""
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(f"Failed to get object '{key}': {e}") from e
        return response["Body"]

    def upload_fileobj(self, fileobj: BinaryIO, key: str) -> None:
        """Upload a file-like object with boto3's managed transfer."""
        try:
            self.client.upload_fileobj(fileobj, self.bucket, key)
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(f"Failed to upload object '{key}': {e}") from e

    def delete_object(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(f"Failed to delete object '{key}': {e}") from e

    def copy_object(self, src_key: str, dst_key: str) -> None:
        """Server-side copy of ``src_key`` to ``dst_key`` within the bucket."""
        try:
            self.client.copy_object(
                Bucket=self.bucket,
                Key=dst_key,
                CopySource={"Bucket": self.bucket, "Key": src_key},
            )
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(
                f"Failed to copy object '{src_key}' to '{dst_key}': {e}"
            ) from e

    def list_objects(
        self,
        prefix: str,
        delimiter: str = "",
        max_keys: int = 1000,
        continuation_token: Optional[str] = None,
    ) -> ListingPage:
        """Fetch one page of keys starting with ``prefix``.

        Args:
            prefix: Key prefix to list under ("" lists the whole bucket)
            delimiter: Grouping delimiter; empty for a flat, recursive listing
            max_keys: Upper bound on entries in the page
            continuation_token: Token from the previous page, if any

        Returns:
            The listing page

        Raises:
            ServiceError: If the listing request fails
        """
        params: dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": max_keys}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        try:
            response = self.client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            raise ServiceError(f"Failed to list prefix '{prefix}': {e}") from e

        objects = [
            ObjectSummary(
                key=obj["Key"],
                size=obj.get("Size", 0),
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        ]
        common_prefixes = [
            common["Prefix"] for common in response.get("CommonPrefixes", [])
        ]
        truncated = response.get("IsTruncated", False)

        logger.debug(
            "Listing page fetched",
            prefix=prefix,
            object_count=len(objects),
            prefix_count=len(common_prefixes),
            truncated=truncated,
        )
        return ListingPage(
            objects=objects,
            common_prefixes=common_prefixes,
            truncated=truncated,
            continuation_token=response.get("NextContinuationToken"),
        )
