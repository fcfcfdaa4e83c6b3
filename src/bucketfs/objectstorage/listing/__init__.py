"""Object storage listing operations."""

from .cursor import ObjectListingResult, S3ObjectListingCursor, iter_listing_pages

__all__ = ["ObjectListingResult", "S3ObjectListingCursor", "iter_listing_pages"]
