"""
Storage abstractions.

- DocumentStore → MongoDB (production) or in-memory (development, tests)
"""

from aria.storage.base import (
    ASCENDING,
    DESCENDING,
    DEFAULT_INDEXES,
    Collections,
    DocumentStore,
    DuplicateDocumentError,
    IndexSpec,
)
from aria.storage.local import InMemoryDocumentStore, create_local_storage
from aria.storage.mongo import MongoDocumentStore, create_mongo_storage

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "DEFAULT_INDEXES",
    "Collections",
    "DocumentStore",
    "DuplicateDocumentError",
    "IndexSpec",
    "InMemoryDocumentStore",
    "create_local_storage",
    "MongoDocumentStore",
    "create_mongo_storage",
]
