"""Document store access layer."""

from learnhub.store.base import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFoundError,
    DocumentStore,
    Filter,
    IndexSpec,
    MissingIndexError,
    OrderBy,
    StoreError,
)
from learnhub.store.memory import MemoryDocumentStore
from learnhub.store.repository import Repository
from learnhub.store.sql import SqlDocumentStore

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "DocumentNotFoundError",
    "DocumentStore",
    "Filter",
    "IndexSpec",
    "MemoryDocumentStore",
    "MissingIndexError",
    "OrderBy",
    "Repository",
    "SqlDocumentStore",
    "StoreError",
]
