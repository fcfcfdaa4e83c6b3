"""Core utilities and shared components for bucketfs."""

from .config import settings
from .exceptions import BucketFSError, ServiceError, ValidationError
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "BucketFSError",
    "ServiceError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
