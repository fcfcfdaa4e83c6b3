"""Translation between hierarchical paths and flat object keys.

A key is relative to the bucket root, uses ``/`` as separator and carries no
leading or trailing separator. The root itself is the empty key.
"""

from typing import Optional

from bucketfs.core.exceptions import ValidationError
from bucketfs.objectstorage.clients.s3_client import S3_SCHEME
from bucketfs.schemas import PATH_SEPARATOR


def normalize_key(path: str, root_key: str = "") -> str:
    """Convert a URI, absolute path or relative path into a key.

    Args:
        path: ``s3://bucket/a/b``, ``/a/b`` or ``a/b``
        root_key: URI of the bucket root; stripped when ``path`` starts with it

    Returns:
        The normalized key, ``""`` for the root

    Raises:
        ValidationError: If ``path`` is a URI outside ``root_key``
    """
    key = path
    if root_key and (
        key == root_key or key.startswith(root_key.rstrip(PATH_SEPARATOR) + PATH_SEPARATOR)
    ):
        key = key[len(root_key.rstrip(PATH_SEPARATOR)):]
    elif key.startswith(S3_SCHEME):
        raise ValidationError(f"Path '{path}' is not under '{root_key}'")

    return PATH_SEPARATOR.join(part for part in key.split(PATH_SEPARATOR) if part)


def is_root_key(key: str) -> bool:
    return key == ""


def convert_to_folder_name(key: str, folder_suffix: str) -> str:
    """Key of the marker object that flags ``key`` as a directory."""
    return key + folder_suffix


def directory_prefix(key: str) -> str:
    """Listing prefix for the children of ``key``."""
    return key + PATH_SEPARATOR if key else ""


def get_parent_key(key: str) -> Optional[str]:
    """Key of the parent directory; None for the root."""
    if is_root_key(key):
        return None
    if PATH_SEPARATOR not in key:
        return ""
    return key.rsplit(PATH_SEPARATOR, 1)[0]


def concat_path(base: str, child: str) -> str:
    base = base.rstrip(PATH_SEPARATOR)
    child = child.strip(PATH_SEPARATOR)
    if not base:
        return child
    return f"{base}{PATH_SEPARATOR}{child}"


def child_name(entry_key: str, prefix: str) -> str:
    """Name of a listing entry relative to the listed prefix."""
    return entry_key[len(prefix):].strip(PATH_SEPARATOR)
