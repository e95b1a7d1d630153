"""
Local storage implementation for development and tests.

Keeps every collection in memory. It honours unique indexes and returns
copies, so callers cannot mutate stored documents by accident.
"""

from __future__ import annotations

import copy
from typing import Any

from bson import ObjectId

from aria.storage.base import (
    DocumentStore,
    DuplicateDocumentError,
    IndexSpec,
)


# =============================================================================
# In-Memory Document Storage
# =============================================================================


class InMemoryDocumentStore(DocumentStore):
    """In-memory document storage for development."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique: dict[str, list[tuple[str, ...]]] = {}
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def ensure_indexes(self, indexes: list[IndexSpec]) -> None:
        for index in indexes:
            if not index.unique:
                continue
            fields = tuple(key for key, _ in index.keys)
            if fields not in self._unique.setdefault(index.collection, []):
                self._unique[index.collection].append(fields)

    def _check_unique(self, collection: str, document: dict[str, Any], skip_id: str | None = None) -> None:
        for fields in self._unique.get(collection, []):
            values = tuple(document.get(f) for f in fields)
            for doc_id, other in self._data.get(collection, {}).items():
                if doc_id == skip_id:
                    continue
                if tuple(other.get(f) for f in fields) == values:
                    raise DuplicateDocumentError(
                        f"Duplicate value for {', '.join(fields)} in {collection}"
                    )

    @staticmethod
    def _matches(doc: dict[str, Any], filters: dict[str, Any] | None) -> bool:
        if not filters:
            return True
        return all(key in doc and doc[key] == value for key, value in filters.items())

    async def insert_one(self, collection: str, document: dict[str, Any]) -> str:
        self._check_unique(collection, document)
        doc_id = str(ObjectId())
        self._data.setdefault(collection, {})[doc_id] = {
            **copy.deepcopy(document),
            "id": doc_id,
        }
        return doc_id

    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self._data.get(collection, {}).values():
            if self._matches(doc, filters):
                return copy.deepcopy(doc)
        return None

    async def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        results = [
            doc for doc in self._data.get(collection, {}).values()
            if self._matches(doc, filters)
        ]

        # Stable sorts applied last key first give a multi-key ordering
        for key, direction in reversed(sort or []):
            results.sort(key=lambda d: d.get(key), reverse=direction < 0)

        if limit:
            results = results[:limit]
        return [copy.deepcopy(doc) for doc in results]

    async def find_one_and_update(
        self,
        collection: str,
        filters: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        for doc_id, doc in self._data.get(collection, {}).items():
            if self._matches(doc, filters):
                merged = {**doc, **copy.deepcopy(updates), "id": doc_id}
                self._check_unique(collection, merged, skip_id=doc_id)
                self._data[collection][doc_id] = merged
                return copy.deepcopy(merged)
        return None

    async def delete_one(self, collection: str, filters: dict[str, Any]) -> bool:
        for doc_id, doc in self._data.get(collection, {}).items():
            if self._matches(doc, filters):
                del self._data[collection][doc_id]
                return True
        return False


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> InMemoryDocumentStore:
    """Create an empty in-memory store."""
    return InMemoryDocumentStore()
