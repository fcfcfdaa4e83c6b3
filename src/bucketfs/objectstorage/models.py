"""Records returned by the object store gateway."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ObjectMetadata:
    """Metadata of a single stored object.

    Attributes:
        content_length: Size of the object in bytes
        last_modified: Last modification time reported by the store
    """

    content_length: int
    last_modified: datetime

    @property
    def last_modified_ms(self) -> int:
        """Last modification time in milliseconds since the epoch."""
        return int(self.last_modified.timestamp() * 1000)


@dataclass(frozen=True)
class ObjectSummary:
    """One object entry of a listing page."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None


@dataclass(frozen=True)
class ListingPage:
    """A single page of a prefix listing.

    Attributes:
        objects: Objects whose keys start with the listed prefix
        common_prefixes: Key groups rolled up at the delimiter, each ending
            with the delimiter
        truncated: Whether more results remain after this page
        continuation_token: Token to request the next page, if truncated
    """

    objects: list[ObjectSummary] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)
    truncated: bool = False
    continuation_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.objects and not self.common_prefixes
