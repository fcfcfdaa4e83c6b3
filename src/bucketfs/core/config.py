"""Configuration management for bucketfs."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Process-wide settings, read from ``BUCKETFS_*`` environment variables.

    Per-bucket behaviour (marker suffix, page size, ownership defaults) lives
    in ``bucketfs.schemas.FilesystemConfig`` instead.
    """

    log_level: str = "WARNING"
    log_format: Literal["json", "console"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "bucketfs"

    model_config = {
        "env_prefix": "BUCKETFS_",
        "case_sensitive": False,
    }


settings = Settings()
