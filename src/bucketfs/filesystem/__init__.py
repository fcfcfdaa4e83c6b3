"""Directory emulation and recursive filesystem operations."""

from .directory import DirectoryEmulator, PathKind
from .operations import ObjectUnderFileSystem, UfsStatus, create_filesystem
from .streams import S3OutputStream

__all__ = [
    "DirectoryEmulator",
    "ObjectUnderFileSystem",
    "PathKind",
    "S3OutputStream",
    "UfsStatus",
    "create_filesystem",
]
