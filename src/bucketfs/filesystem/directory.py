"""Directory emulation over a flat key namespace.

A path is a directory when it is the bucket root, when its folder marker
object exists, or when at least one key lives under ``path/`` (an implicit
directory). Classification never writes; materializing an implicit directory
is the separate, idempotent ``ensure_materialized`` step.
"""

from enum import Enum
from typing import Optional

from bucketfs.core import get_logger
from bucketfs.core.exceptions import NotFoundError, ServiceError, ValidationError
from bucketfs.objectstorage.gateway import ObjectStoreGateway
from bucketfs.objectstorage.models import ObjectMetadata
from bucketfs.path import (
    convert_to_folder_name,
    directory_prefix,
    get_parent_key,
    is_root_key,
    normalize_key,
)
from bucketfs.schemas import PATH_SEPARATOR, FilesystemConfig

logger = get_logger(__name__)


class PathKind(str, Enum):
    """What a path currently denotes in the store."""

    ROOT = "root"
    DIRECTORY = "directory"
    IMPLICIT_DIRECTORY = "implicit_directory"
    MISSING = "missing"

    @property
    def is_directory(self) -> bool:
        return self is not PathKind.MISSING


class DirectoryEmulator:
    """Answers file/directory questions for paths in one bucket."""

    def __init__(
        self, gateway: ObjectStoreGateway, config: Optional[FilesystemConfig] = None
    ):
        """Initialize the emulator.

        Args:
            gateway: Gateway for the bucket
            config: Folder marker and materialization settings
        """
        self.gateway = gateway
        self.config = config or FilesystemConfig()

    def to_key(self, path: str) -> str:
        return normalize_key(path, self.gateway.root_key)

    def folder_key(self, path: str) -> str:
        return convert_to_folder_name(self.to_key(path), self.config.folder_suffix)

    def classify(self, path: str) -> PathKind:
        """Classify ``path`` without modifying the store.

        Store failures degrade to ``PathKind.MISSING``.
        """
        key = self.to_key(path)
        if is_root_key(key):
            return PathKind.ROOT

        try:
            if self.gateway.get_object_metadata(self.folder_key(key)) is not None:
                return PathKind.DIRECTORY
        except ServiceError as e:
            # The marker may still be missing; fall back to looking for children
            logger.warning("Folder marker lookup failed", key=key, error=str(e))

        try:
            page = self.gateway.list_objects(
                directory_prefix(key), delimiter=PATH_SEPARATOR, max_keys=1
            )
        except ServiceError as e:
            logger.warning("Child lookup failed", key=key, error=str(e))
            return PathKind.MISSING

        if page.is_empty:
            return PathKind.MISSING
        return PathKind.IMPLICIT_DIRECTORY

    def ensure_materialized(self, path: str) -> bool:
        """Write the folder marker for ``path`` if it is not the root.

        Returns:
            True when the marker was written (or the path is the root)
        """
        key = self.to_key(path)
        if is_root_key(key):
            return True

        folder_key = self.folder_key(key)
        try:
            self.gateway.put_object(folder_key, b"", content_length=0)
        except ServiceError as e:
            logger.error("Failed to create directory", key=key, error=str(e))
            return False

        logger.debug("Folder marker written", key=key, marker=folder_key)
        return True

    def is_directory(self, path: str) -> bool:
        """Whether ``path`` is a directory.

        An implicit directory gets its folder marker written on the way,
        unless materialization is disabled in the configuration. A URI
        outside this bucket is not a directory here.
        """
        try:
            kind = self.classify(path)
        except ValidationError as e:
            logger.warning("Path outside bucket", path=path, error=str(e))
            return False
        if (
            kind is PathKind.IMPLICIT_DIRECTORY
            and self.config.materialize_implicit_directories
        ):
            logger.info("Materializing implicit directory", key=self.to_key(path))
            self.ensure_materialized(path)
        return kind.is_directory

    def is_file(self, path: str) -> bool:
        try:
            key = self.to_key(path)
        except ValidationError as e:
            logger.warning("Path outside bucket", path=path, error=str(e))
            return False
        if is_root_key(key):
            return False
        try:
            return self.gateway.get_object_metadata(key) is not None
        except ServiceError as e:
            logger.warning("File lookup failed", key=key, error=str(e))
            return False

    def parent_exists(self, path: str) -> bool:
        parent = get_parent_key(self.to_key(path))
        if parent is None:
            return True
        return self.is_directory(parent)

    def get_metadata(self, path: str) -> ObjectMetadata:
        """Metadata of the file at ``path``, or of the directory's marker.

        Raises:
            NotFoundError: If no object backs the path
        """
        key = self.to_key(path)
        lookup_key = self.folder_key(key) if self.is_directory(key) else key
        try:
            metadata = self.gateway.get_object_metadata(lookup_key)
        except ServiceError as e:
            logger.warning("Failed to get object, treating as absent", key=key, error=str(e))
            raise NotFoundError(path) from e

        if metadata is None:
            raise NotFoundError(path)
        return metadata
