"""Filesystem operations over an object store bucket.

This module composes single-object gateway calls into directory-level
operations: creating directory chains, renaming files and whole trees, and
deleting subtrees.

Consistency model:
    Each gateway call is atomic for its one object; nothing above that is.
    A recursive rename or delete that fails part way leaves the tree
    partially processed and reports only ``False``. Destination existence is
    checked once, before any mutation, so a concurrent writer creating the
    destination during a long rename is not detected.

Error reporting:
    Store failures and failed preconditions are logged and turned into a
    ``False`` return. Metadata reads raise ``NotFoundError``; deleting a
    non-empty directory without ``recursive`` raises
    ``DirectoryNotEmptyError``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from bucketfs.core import get_logger, get_tracer
from bucketfs.core.exceptions import (
    AlreadyExistsError,
    BucketFSError,
    DirectoryNotEmptyError,
    InvalidOperationError,
    NotFoundError,
    ServiceError,
)
from bucketfs.filesystem.directory import DirectoryEmulator, PathKind
from bucketfs.filesystem.streams import S3OutputStream
from bucketfs.objectstorage.clients import S3ClientConfig, S3ClientManager
from bucketfs.objectstorage.gateway import ObjectStoreGateway, S3ObjectStoreGateway
from bucketfs.objectstorage.listing import S3ObjectListingCursor
from bucketfs.path import (
    child_name,
    concat_path,
    directory_prefix,
    get_parent_key,
    is_root_key,
)
from bucketfs.schemas import PATH_SEPARATOR, FilesystemConfig

logger = get_logger(__name__)
tracer = get_tracer(__name__)


@dataclass(frozen=True)
class UfsStatus:
    """A directory entry returned by ``list_status``.

    Attributes:
        name: Path of the entry relative to the listed directory
        is_directory: Whether the entry is a directory
        content_length: Size in bytes (0 for directories)
        last_modified: Modification time from the listing, if known
    """

    name: str
    is_directory: bool
    content_length: int = 0
    last_modified: Optional[datetime] = None


class ObjectUnderFileSystem:
    """Hierarchical filesystem view of a single bucket."""

    def __init__(
        self, gateway: ObjectStoreGateway, config: Optional[FilesystemConfig] = None
    ):
        """Initialize the filesystem.

        Args:
            gateway: Gateway for the bucket
            config: Folder marker, paging and default ownership settings
        """
        self.gateway = gateway
        self.config = config or FilesystemConfig()
        self.emulator = DirectoryEmulator(gateway, self.config)
        logger.info("Object filesystem initialized", root=gateway.root_key)

    def get_under_fs_type(self) -> str:
        return "s3"

    # Classification

    def is_directory(self, path: str) -> bool:
        return self.emulator.is_directory(path)

    def is_file(self, path: str) -> bool:
        return self.emulator.is_file(path)

    def exists(self, path: str) -> bool:
        return self.is_file(path) or self.is_directory(path)

    def get_file_size(self, path: str) -> int:
        """Size in bytes of the object behind ``path``.

        Raises:
            NotFoundError: If no object backs the path
        """
        return self.emulator.get_metadata(path).content_length

    def get_modification_time_ms(self, path: str) -> int:
        """Modification time of ``path`` in epoch milliseconds.

        Raises:
            NotFoundError: If no object backs the path
        """
        return self.emulator.get_metadata(path).last_modified_ms

    # Ownership is not stored; fixed values from the configuration

    def get_owner(self, path: str) -> str:
        return self.config.default_owner

    def get_group(self, path: str) -> str:
        return self.config.default_group

    def get_mode(self, path: str) -> int:
        return self.config.default_mode

    def set_owner(self, path: str, user: str, group: str) -> None:
        pass

    def set_mode(self, path: str, mode: int) -> None:
        pass

    # Streams

    def open(self, path: str) -> Any:
        """Open ``path`` for reading.

        Returns:
            A readable byte stream, or None if the object cannot be fetched
        """
        key = self.emulator.to_key(path)
        try:
            return self.gateway.get_object(key)
        except ServiceError as e:
            logger.error("Failed to open file", key=key, error=str(e))
            return None

    def create(self, path: str, create_parent: bool = False) -> S3OutputStream:
        """Open ``path`` for writing; the object appears when the stream closes.

        Raises:
            InvalidOperationError: If ``create_parent`` is set and the parent
                chain cannot be created
        """
        key = self.emulator.to_key(path)
        if create_parent:
            parent = get_parent_key(key)
            if parent is not None and not self.mkdirs(parent, create_parent=True):
                raise InvalidOperationError(
                    f"Cannot create parent directory for {path}"
                )
        return S3OutputStream(self.gateway, key)

    # Listing

    def list_status(
        self, path: str, recursive: bool = False
    ) -> Optional[list[UfsStatus]]:
        """List the entries under a directory.

        Folder markers are reported as directories. In recursive mode every
        ancestor of a deep key is reported as a directory too, whether or not
        it has a marker.

        Args:
            path: Directory to list
            recursive: List the whole subtree instead of one level

        Returns:
            Entries sorted by name, or None if ``path`` is not a directory or
            the first listing request fails
        """
        key = self.emulator.to_key(path)
        if not self.is_directory(key):
            return None

        prefix = directory_prefix(key)
        suffix = self.config.folder_suffix
        cursor = S3ObjectListingCursor(
            self.gateway, prefix, recursive, self.config.listing_length
        )
        chunk = cursor.get_next_chunk()
        if chunk is None:
            logger.error("Failed to list directory", key=key)
            return None

        entries: dict[str, UfsStatus] = {}

        def add_directory(name: str) -> None:
            entries.setdefault(name, UfsStatus(name=name, is_directory=True))
            if recursive:
                parts = name.split(PATH_SEPARATOR)
                for i in range(1, len(parts)):
                    ancestor = PATH_SEPARATOR.join(parts[:i])
                    entries.setdefault(
                        ancestor, UfsStatus(name=ancestor, is_directory=True)
                    )

        while chunk is not None:
            for obj in chunk.get_object_summaries() or []:
                name = child_name(obj.key, prefix)
                if obj.key.endswith(suffix):
                    name = name[: -len(suffix)].rstrip(PATH_SEPARATOR)
                    if name:
                        add_directory(name)
                elif obj.key.endswith(PATH_SEPARATOR):
                    if name:
                        add_directory(name)
                elif name:
                    if recursive and PATH_SEPARATOR in name:
                        add_directory(name.rsplit(PATH_SEPARATOR, 1)[0])
                    entries.setdefault(
                        name,
                        UfsStatus(
                            name=name,
                            is_directory=False,
                            content_length=obj.size,
                            last_modified=obj.last_modified,
                        ),
                    )
            for common_prefix in chunk.get_common_prefixes() or []:
                name = child_name(common_prefix, prefix)
                if name:
                    add_directory(name)
            chunk = chunk.get_next_chunk()

        if cursor.truncated:
            logger.error("Listing ended before the last page", key=key)
            return None
        return sorted(entries.values(), key=lambda status: status.name)

    def list_names(
        self, path: str, recursive: bool = False
    ) -> Optional[list[str]]:
        """Names of the entries under a directory, or None (see ``list_status``)."""
        statuses = self.list_status(path, recursive=recursive)
        if statuses is None:
            return None
        return [status.name for status in statuses]

    # Directory creation

    def mkdirs(self, path: Optional[str], create_parent: bool = True) -> bool:
        """Create a directory by writing its folder marker.

        Args:
            path: Directory to create; None is a no-op that returns False
            create_parent: Create missing ancestors first, top-down

        Returns:
            True if the directory exists afterwards
        """
        if path is None:
            return False

        with tracer.start_as_current_span("bucketfs.mkdirs") as span:
            span.set_attribute("bucketfs.path", path)
            if self.is_directory(path):
                return True
            if self.is_file(path):
                return self._reject(
                    InvalidOperationError(
                        f"Cannot create directory {path} because it is already a file"
                    ),
                    path=path,
                )
            if self.emulator.parent_exists(path):
                return self.emulator.ensure_materialized(path)
            if not create_parent:
                return self._reject(
                    InvalidOperationError(
                        f"Cannot create directory {path} because parent does not exist"
                    ),
                    path=path,
                )

            parent = get_parent_key(self.emulator.to_key(path))
            return self.mkdirs(parent, create_parent=True) and (
                self.emulator.ensure_materialized(path)
            )

    # Rename

    def rename_file(self, src: str, dst: str) -> bool:
        """Move a file by server-side copy followed by delete of the source.

        If the copy succeeds and the delete fails, both keys exist afterwards.
        """
        if not self.is_file(src):
            return self._reject(
                NotFoundError(
                    f"Unable to rename {src} to {dst} because source does not "
                    f"exist or is a directory"
                ),
                src=src,
                dst=dst,
            )
        if self.exists(dst):
            return self._reject(
                AlreadyExistsError(
                    f"Unable to rename {src} to {dst} because destination already exists"
                ),
                src=src,
                dst=dst,
            )

        src_key = self.emulator.to_key(src)
        dst_key = self.emulator.to_key(dst)
        return self._copy(src_key, dst_key) and self._delete_key(src_key)

    def rename_directory(self, src: str, dst: str) -> bool:
        """Move a directory tree.

        The destination's folder marker is established first, then each
        child is renamed (recursing into subdirectories), and only when every
        child succeeded is the remainder of ``src`` deleted. The first child
        failure aborts the rename and leaves the tree partially moved.
        """
        with tracer.start_as_current_span("bucketfs.rename_directory") as span:
            span.set_attribute("bucketfs.src", src)
            span.set_attribute("bucketfs.dst", dst)

            src_key = self.emulator.to_key(src)
            dst_key = self.emulator.to_key(dst)
            if is_root_key(src_key) or is_root_key(dst_key):
                return self._reject(
                    InvalidOperationError("The bucket root cannot be renamed"),
                    src=src,
                    dst=dst,
                )
            if dst_key == src_key or dst_key.startswith(directory_prefix(src_key)):
                return self._reject(
                    InvalidOperationError(
                        f"Unable to rename {src} to {dst} because destination "
                        f"is inside the source directory"
                    ),
                    src=src,
                    dst=dst,
                )

            children = self.list_status(src)
            if children is None:
                logger.error("Failed to list directory, aborting rename", src=src)
                return False

            if self.exists(dst):
                return self._reject(
                    AlreadyExistsError(
                        f"Unable to rename {src} to {dst} because destination already exists"
                    ),
                    src=src,
                    dst=dst,
                )

            if self.emulator.classify(src_key) is PathKind.DIRECTORY:
                marker_moved = self._copy(
                    self.emulator.folder_key(src_key), self.emulator.folder_key(dst_key)
                )
            else:
                marker_moved = self.emulator.ensure_materialized(dst_key)
            if not marker_moved:
                return False

            for child in children:
                child_src = concat_path(src_key, child.name)
                child_dst = concat_path(dst_key, child.name)
                if child.is_directory:
                    success = self.rename_directory(child_src, child_dst)
                else:
                    success = self.rename_file(child_src, child_dst)
                if not success:
                    logger.error(
                        "Failed to rename path, aborting rename",
                        child=child_src,
                        src=src,
                        dst=dst,
                    )
                    return False

            return self.delete_directory(src_key, recursive=True)

    # Delete

    def delete(self, path: str, recursive: bool = False) -> bool:
        """Delete a file, or a directory (see ``delete_directory``)."""
        if self.is_file(path):
            return self.delete_file(path)
        if self.is_directory(path):
            return self.delete_directory(path, recursive=recursive)
        return self._reject(NotFoundError(f"Cannot delete {path}: no such path"), path=path)

    def delete_file(self, path: str) -> bool:
        return self._delete_key(self.emulator.to_key(path))

    def delete_directory(self, path: str, recursive: bool = False) -> bool:
        """Delete a directory and its folder marker.

        With ``recursive`` the whole subtree is enumerated and every key in it
        is deleted before the marker; the first failed delete aborts.

        Raises:
            DirectoryNotEmptyError: If the directory has children and
                ``recursive`` is not set
        """
        key = self.emulator.to_key(path)
        with tracer.start_as_current_span("bucketfs.delete_directory") as span:
            span.set_attribute("bucketfs.path", path)
            span.set_attribute("bucketfs.recursive", recursive)

            if recursive:
                keys = self._list_subtree_keys(key)
                if keys is None:
                    return False
                for child_key in keys:
                    if not self._delete_key(child_key):
                        logger.error(
                            "Failed to delete path, aborting delete",
                            key=child_key,
                            directory=key,
                        )
                        return False
            else:
                children = self.list_status(key)
                if children is None:
                    logger.error("Failed to list directory, aborting delete", key=key)
                    return False
                if children:
                    raise DirectoryNotEmptyError(
                        f"Cannot delete non-empty directory {path} "
                        f"without the recursive flag"
                    )

            if is_root_key(key):
                return True
            return self._delete_key(self.emulator.folder_key(key))

    # Single-object helpers

    def _list_subtree_keys(self, key: str) -> Optional[list[str]]:
        cursor = S3ObjectListingCursor(
            self.gateway,
            directory_prefix(key),
            recursive=True,
            listing_length=self.config.listing_length,
        )
        chunk = cursor.get_next_chunk()
        if chunk is None:
            logger.error("Failed to list directory", key=key)
            return None

        keys: list[str] = []
        while chunk is not None:
            keys.extend(chunk.get_object_names() or [])
            chunk = chunk.get_next_chunk()

        if cursor.truncated:
            logger.error("Listing ended before the last page", key=key)
            return None
        return keys

    def _copy(self, src_key: str, dst_key: str) -> bool:
        logger.info("Copying object", src=src_key, dst=dst_key)
        try:
            self.gateway.copy_object(src_key, dst_key)
        except ServiceError as e:
            logger.error("Failed to copy object", src=src_key, dst=dst_key, error=str(e))
            return False
        return True

    def _delete_key(self, key: str) -> bool:
        try:
            self.gateway.delete_object(key)
        except ServiceError as e:
            logger.error("Failed to delete object", key=key, error=str(e))
            return False
        return True

    @staticmethod
    def _reject(error: BucketFSError, **context: Any) -> bool:
        logger.error(str(error), error_type=type(error).__name__, **context)
        return False


def create_filesystem(
    uri: str,
    client_config: Optional[S3ClientConfig] = None,
    config: Optional[FilesystemConfig] = None,
) -> ObjectUnderFileSystem:
    """Build a filesystem for the bucket named in ``uri``.

    Args:
        uri: ``s3://bucket`` or any path inside the bucket
        client_config: Connection settings for the S3 client
        config: Directory emulation settings

    Returns:
        Filesystem rooted at the bucket

    Raises:
        ValidationError: If ``uri`` is not an S3 URI with a bucket
    """
    bucket, _ = S3ClientManager.parse_s3_path(uri)
    client_manager = S3ClientManager(client_config or S3ClientConfig())
    gateway = S3ObjectStoreGateway(client_manager, bucket)
    return ObjectUnderFileSystem(gateway, config)
