"""Lazy, forward-only paging over a prefix listing."""

from typing import Iterator, Optional, Protocol

from bucketfs.core import get_logger
from bucketfs.core.exceptions import ServiceError
from bucketfs.objectstorage.gateway import ObjectStoreGateway
from bucketfs.objectstorage.models import ListingPage, ObjectSummary
from bucketfs.schemas import LISTING_LENGTH, PATH_SEPARATOR

logger = get_logger(__name__)


class ObjectListingResult(Protocol):
    """One backend's view of a paged prefix listing."""

    def get_object_names(self) -> Optional[list[str]]: ...

    def get_common_prefixes(self) -> Optional[list[str]]: ...

    def get_next_chunk(self) -> Optional["ObjectListingResult"]: ...


class S3ObjectListingCursor:
    """Pages through the keys under a prefix, one request per page.

    The cursor holds no page until ``get_next_chunk`` is first called. Each
    later call fetches the following page only if the current one was
    truncated, and returns None once the listing is exhausted. A failed
    request also ends the listing with None. Either way the end is final:
    later calls return None without another request. A cursor that ended
    while ``truncated`` is still True stopped early, and callers have to
    treat its listing as incomplete.

    A cursor cannot be rewound. Build a new one to list again.

    Example:
        >>> cursor = S3ObjectListingCursor(gateway, "data/", recursive=True)
        >>> for page in iter_listing_pages(cursor):
        ...     print(page.get_object_names())
    """

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        prefix: str,
        recursive: bool = False,
        listing_length: int = LISTING_LENGTH,
    ):
        """Initialize the cursor.

        Args:
            gateway: Gateway issuing the listing requests
            prefix: Key prefix to enumerate
            recursive: List the whole subtree instead of one level
            listing_length: Maximum entries per page
        """
        self.gateway = gateway
        self.prefix = prefix
        self.delimiter = "" if recursive else PATH_SEPARATOR
        self.listing_length = listing_length
        self._page: Optional[ListingPage] = None
        self._done = False

    @property
    def truncated(self) -> bool:
        """Whether the current page reported more data; False before the first fetch."""
        return self._page is not None and self._page.truncated

    def get_object_summaries(self) -> Optional[list[ObjectSummary]]:
        if self._page is None:
            return None
        return list(self._page.objects)

    def get_object_names(self) -> Optional[list[str]]:
        if self._page is None:
            return None
        return [obj.key for obj in self._page.objects]

    def get_common_prefixes(self) -> Optional[list[str]]:
        if self._page is None:
            return None
        return list(self._page.common_prefixes)

    def get_next_chunk(self) -> Optional["S3ObjectListingCursor"]:
        """Advance to the next page.

        Returns:
            This cursor positioned on the new page, or None at end of data
            or when the request fails
        """
        if self._done:
            return None

        token = None
        if self._page is not None:
            if not self._page.truncated:
                self._done = True
                return None
            token = self._page.continuation_token

        try:
            self._page = self.gateway.list_objects(
                self.prefix,
                delimiter=self.delimiter,
                max_keys=self.listing_length,
                continuation_token=token,
            )
        except ServiceError as e:
            logger.error("Failed to list path", prefix=self.prefix, error=str(e))
            self._done = True
            return None
        return self


def iter_listing_pages(
    cursor: S3ObjectListingCursor,
) -> Iterator[S3ObjectListingCursor]:
    """Yield the cursor once per fetched page until the listing ends."""
    chunk = cursor.get_next_chunk()
    while chunk is not None:
        yield chunk
        chunk = chunk.get_next_chunk()
