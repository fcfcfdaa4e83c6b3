"""Object storage access for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager
from .gateway import ObjectStoreGateway, S3ObjectStoreGateway
from .listing import ObjectListingResult, S3ObjectListingCursor, iter_listing_pages
from .models import ListingPage, ObjectMetadata, ObjectSummary

__all__ = [
    "ListingPage",
    "ObjectListingResult",
    "ObjectMetadata",
    "ObjectStoreGateway",
    "ObjectSummary",
    "S3ClientConfig",
    "S3ClientManager",
    "S3ObjectListingCursor",
    "S3ObjectStoreGateway",
    "iter_listing_pages",
]
