"""
MongoDB storage implementation.

Uses the pymongo async client. The client is created once per process and
opened by `connect()`, which pings the server so a dead database fails at
startup instead of on the first request. Driver errors are logged and
re-raised as `StorageError` so the API surfaces an opaque 500.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from bson import ObjectId
from bson.errors import InvalidDocument
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from aria.core.errors import StorageError
from aria.storage.base import (
    DocumentStore,
    DuplicateDocumentError,
    IndexSpec,
)

logger = logging.getLogger(__name__)


def _wrap_errors(func):
    """Translate driver failures into the API error taxonomy."""

    @wraps(func)
    async def wrapper(self, collection: str, *args, **kwargs):
        try:
            return await func(self, collection, *args, **kwargs)
        except DuplicateKeyError as e:
            raise DuplicateDocumentError(f"Duplicate key in {collection}") from e
        except (PyMongoError, InvalidDocument, OverflowError) as e:
            logger.error(f"MongoDB {func.__name__} on {collection} failed: {e}")
            raise StorageError() from e

    return wrapper


class MongoDocumentStore(DocumentStore):
    """Document storage backed by a MongoDB database."""

    def __init__(self, uri: str, db_name: str, timeout_ms: int = 5000):
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self._client: AsyncMongoClient | None = None

    @property
    def db(self):
        if self._client is None:
            raise StorageError("Store is not connected")
        return self._client[self.db_name]

    async def connect(self) -> None:
        self._client = AsyncMongoClient(
            self.uri,
            serverSelectionTimeoutMS=self.timeout_ms,
            connectTimeoutMS=self.timeout_ms,
            tz_aware=True,
        )
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            await self._client.close()
            self._client = None
            raise StorageError(f"Cannot reach MongoDB: {e}") from e
        logger.info(f"Connected to MongoDB database '{self.db_name}'")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    async def ensure_indexes(self, indexes: list[IndexSpec]) -> None:
        try:
            for index in indexes:
                await self.db[index.collection].create_index(
                    list(index.keys),
                    unique=index.unique,
                )
        except PyMongoError as e:
            raise StorageError(f"Cannot create indexes: {e}") from e

    # =========================================================================
    # id translation ("id" string outside, "_id" ObjectId inside)
    # =========================================================================

    @staticmethod
    def _to_filter(filters: dict[str, Any] | None) -> dict[str, Any] | None:
        """Build a Mongo filter; returns None when the filter can never match."""
        query = dict(filters or {})
        if "id" in query:
            doc_id = query.pop("id")
            if not isinstance(doc_id, str) or not ObjectId.is_valid(doc_id):
                return None
            query["_id"] = ObjectId(doc_id)
        return query

    @staticmethod
    def _from_mongo(doc: dict[str, Any] | None) -> dict[str, Any] | None:
        if doc is None:
            return None
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return doc

    @staticmethod
    def _to_sort(sort: list[tuple[str, int]] | None) -> list[tuple[str, int]] | None:
        if not sort:
            return None
        return [("_id" if key == "id" else key, direction) for key, direction in sort]

    # =========================================================================
    # CRUD
    # =========================================================================

    @_wrap_errors
    async def insert_one(self, collection: str, document: dict[str, Any]) -> str:
        doc = {k: v for k, v in document.items() if k not in ("id", "_id")}
        result = await self.db[collection].insert_one(doc)
        return str(result.inserted_id)

    @_wrap_errors
    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        query = self._to_filter(filters)
        if query is None:
            return None
        return self._from_mongo(await self.db[collection].find_one(query))

    @_wrap_errors
    async def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        sort: list[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        query = self._to_filter(filters)
        if query is None:
            return []
        cursor = self.db[collection].find(query, sort=self._to_sort(sort), limit=limit)
        return [self._from_mongo(doc) async for doc in cursor]

    @_wrap_errors
    async def find_one_and_update(
        self,
        collection: str,
        filters: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        query = self._to_filter(filters)
        if query is None:
            return None
        updates = {k: v for k, v in updates.items() if k not in ("id", "_id")}
        doc = await self.db[collection].find_one_and_update(
            query,
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_mongo(doc)

    @_wrap_errors
    async def delete_one(self, collection: str, filters: dict[str, Any]) -> bool:
        query = self._to_filter(filters)
        if query is None:
            return False
        result = await self.db[collection].delete_one(query)
        return result.deleted_count > 0


def create_mongo_storage(uri: str, db_name: str, timeout_ms: int = 5000) -> MongoDocumentStore:
    """Create a MongoDB store (not yet connected)."""
    return MongoDocumentStore(uri, db_name, timeout_ms)
