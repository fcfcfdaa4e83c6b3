from .keys import (
    child_name,
    concat_path,
    convert_to_folder_name,
    directory_prefix,
    get_parent_key,
    is_root_key,
    normalize_key,
)

__all__ = [
    "child_name",
    "concat_path",
    "convert_to_folder_name",
    "directory_prefix",
    "get_parent_key",
    "is_root_key",
    "normalize_key",
]
