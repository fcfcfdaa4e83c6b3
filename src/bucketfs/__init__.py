"""A hierarchical filesystem view over flat S3-compatible object storage.

Object stores only offer put/get/delete/copy and prefix listing on opaque
keys. This package layers directories on top: directory existence is
inferred from zero-length folder marker objects or from keys nested under a
path, and directory creation, rename and delete are composed from
single-object requests.

Key Features:
    - Directory detection with write-through materialization of implicit
      directories
    - Parent-chain directory creation
    - File and recursive directory rename (copy, then delete)
    - Recursive delete through paged prefix listings
    - CLI interface

Recommended Usage:
    >>> from bucketfs import S3ClientConfig, create_filesystem
    >>> fs = create_filesystem(
    ...     "s3://my-bucket", S3ClientConfig(aws_profile="my-profile")
    ... )
    >>> fs.mkdirs("data/2024", create_parent=True)
    True
    >>> fs.rename_directory("data/2024", "archive/2024")
    True

Consistency:
    Only single-object requests are atomic. A multi-object operation that
    fails part way returns False and leaves partial results in place.
"""

__version__ = "0.1.0"

from .core.exceptions import (
    AlreadyExistsError,
    BucketFSError,
    DirectoryNotEmptyError,
    InvalidOperationError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from .filesystem import (
    DirectoryEmulator,
    ObjectUnderFileSystem,
    PathKind,
    UfsStatus,
    create_filesystem,
)
from .objectstorage import (
    ObjectMetadata,
    S3ClientConfig,
    S3ClientManager,
    S3ObjectListingCursor,
    S3ObjectStoreGateway,
)
from .schemas import FilesystemConfig

__all__ = [
    # Configuration
    "FilesystemConfig",
    "S3ClientConfig",
    # Filesystem
    "DirectoryEmulator",
    "ObjectUnderFileSystem",
    "PathKind",
    "UfsStatus",
    "create_filesystem",
    # Object storage
    "ObjectMetadata",
    "S3ClientManager",
    "S3ObjectListingCursor",
    "S3ObjectStoreGateway",
    # Errors
    "AlreadyExistsError",
    "BucketFSError",
    "DirectoryNotEmptyError",
    "InvalidOperationError",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
]
