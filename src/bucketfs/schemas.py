"""Filesystem configuration schema for bucketfs."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

PATH_SEPARATOR = "/"
FOLDER_SUFFIX = "_$folder$"
LISTING_LENGTH = 1000
DEFAULT_FILE_SYSTEM_MODE = 0o777


class FilesystemConfig(BaseModel):
    """Behaviour of the directory emulation layered over a bucket."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    folder_suffix: str = Field(
        FOLDER_SUFFIX, description="Suffix of the zero-length directory marker"
    )
    listing_length: int = Field(
        LISTING_LENGTH, gt=0, description="Maximum keys fetched per listing page"
    )
    materialize_implicit_directories: bool = Field(
        True,
        description="Write a folder marker when a directory is inferred from its children",
    )
    default_owner: str = Field("", description="Owner reported for every path")
    default_group: str = Field("", description="Group reported for every path")
    default_mode: int = Field(
        DEFAULT_FILE_SYSTEM_MODE, description="Mode reported for every path"
    )

    @field_validator("folder_suffix")
    @classmethod
    def _check_folder_suffix(cls, value: str) -> str:
        if not value:
            raise ValueError("folder_suffix must not be empty")
        if PATH_SEPARATOR in value:
            raise ValueError(
                f"folder_suffix must not contain the path separator: {value!r}"
            )
        return value

