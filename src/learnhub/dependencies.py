"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from learnhub.config import get_settings
from learnhub.database import get_session as _get_session
from learnhub.store import DocumentStore, IndexSpec, MemoryDocumentStore, SqlDocumentStore

_memory_store: MemoryDocumentStore | None = None


def declared_indexes() -> list[IndexSpec]:
    return [IndexSpec.parse(spec) for spec in get_settings().store_indexes]


def get_memory_store() -> MemoryDocumentStore:
    """Process-wide in-memory store for ``store_backend=memory``.

    Requests use ``session()`` views of it so pending writes stay per request.
    """
    global _memory_store  # noqa: PLW0603
    if _memory_store is None:
        _memory_store = MemoryDocumentStore(declared_indexes())
    return _memory_store


def reset_memory_store() -> None:
    global _memory_store  # noqa: PLW0603
    _memory_store = None


async def get_store() -> AsyncGenerator[DocumentStore, None]:
    """Yield a store bound to the configured project.

    Write endpoints commit explicitly; anything left pending is rolled back.
    """
    settings = get_settings()
    if settings.store_backend == "memory":
        store = get_memory_store().session()
        try:
            yield store
        finally:
            await store.rollback()
        return

    async for session in _get_session():
        yield SqlDocumentStore(session, settings.project_id, declared_indexes())

