"""
Storage abstraction layer.

All persistence goes through `DocumentStore`. This allows swapping the
MongoDB implementation for the in-memory one (development, tests) without
changing service code.

Conventions shared by every implementation:
- documents are plain dicts; the identifier is exposed as a string under "id"
- filters are equality matches on top-level fields ("id" included)
- sort specs are (field, direction) pairs, direction 1 or -1
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from aria.core.errors import AriaError


ASCENDING = 1
DESCENDING = -1


class DuplicateDocumentError(AriaError):
    """A write would break a unique index."""

    status_code = 409
    code = "duplicate"
    message = "Document already exists"


# =============================================================================
# Storage Interface
# =============================================================================


class DocumentStore(ABC):
    """
    Storage for structured documents (users, characters).

    Production Implementation: MongoDB (pymongo async client)
    Local Implementation: in-memory
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and fail if the store is unreachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""
        pass

    @abstractmethod
    async def ensure_indexes(self, indexes: list[IndexSpec]) -> None:
        """Create the given indexes if they are missing."""
        pass

    @abstractmethod
    async def insert_one(self, collection: str, document: dict[str, Any]) -> str:
        """Insert a document, return its new id."""
        pass

    @abstractmethod
    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        """Get the first document matching all filters."""
        pass

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents. A limit of 0 means no limit."""
        pass

    @abstractmethod
    async def find_one_and_update(
        self,
        collection: str,
        filters: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Set `updates` on the first document matching all filters, atomically.

        Returns the document after the update, or None if nothing matched.
        """
        pass

    @abstractmethod
    async def delete_one(self, collection: str, filters: dict[str, Any]) -> bool:
        """Delete the first document matching all filters."""
        pass


# =============================================================================
# Collections and indexes
# =============================================================================


class Collections:
    """Standard collection names."""

    USERS = "users"
    CHARACTERS = "characters"


@dataclass(frozen=True)
class IndexSpec:
    collection: str
    keys: tuple[tuple[str, int], ...]
    unique: bool = False


DEFAULT_INDEXES: list[IndexSpec] = [
    IndexSpec(Collections.USERS, (("email", ASCENDING),), unique=True),
    IndexSpec(Collections.CHARACTERS, (("owner", ASCENDING),)),
    IndexSpec(Collections.CHARACTERS, (("owner", ASCENDING), ("createdAt", DESCENDING))),
]
