"""In-process document store used for tests and offline runs."""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from learnhub.store.base import (
    Document,
    DocumentNotFoundError,
    DocumentStore,
    Filter,
    IndexSpec,
    MissingIndexError,
    OrderBy,
    resolve_timestamps,
    utcnow,
)


def sort_key(value: Any) -> tuple[int, Any]:
    """Sort missing values after present ones, numbers before strings."""
    if value is None:
        return (2, 0)
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store with the same index and transaction rules as the SQL store.

    Writes go to a private working copy. ``commit`` applies only the documents
    this store touched to the committed state, which ``session()`` stores share,
    so concurrent sessions never discard each other's work.
    """

    def __init__(
        self,
        indexes: Iterable[IndexSpec] = (),
        committed: dict[str, dict[str, dict[str, Any]]] | None = None,
    ) -> None:
        super().__init__(indexes)
        self._committed: dict[str, dict[str, dict[str, Any]]] = {} if committed is None else committed
        self._collections = copy.deepcopy(self._committed)
        self._dirty: set[tuple[str, str]] = set()
        self.fail_ordered_queries = False

    def session(self) -> MemoryDocumentStore:
        """New store over the same committed state, with its own pending writes."""
        child = MemoryDocumentStore(self._indexes, committed=self._committed)
        child.fail_ordered_queries = self.fail_ordered_queries
        return child

    def _coll(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    async def get(self, collection: str, doc_id: str) -> Document | None:
        data = self._coll(collection).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        self.check_index(collection, filters, order_by)
        docs = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._coll(collection).items()
            if all(f.matches(data) for f in filters)
        ]
        if order_by is not None:
            present = [d for d in docs if d.data.get(order_by.field) is not None]
            missing = [d for d in docs if d.data.get(order_by.field) is None]
            present.sort(key=lambda d: sort_key(d.data.get(order_by.field)), reverse=order_by.descending)
            docs = present + missing
        if limit is not None:
            docs = docs[:limit]
        return docs

    def check_index(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: OrderBy | None,
    ) -> None:
        if self.fail_ordered_queries and order_by is not None:
            msg = f"The query requires an index: collection={collection}"
            raise MissingIndexError(msg)
        super().check_index(collection, filters, order_by)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._coll(collection)[doc_id] = resolve_timestamps(data, utcnow())
        self._dirty.add((collection, doc_id))
        return doc_id

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        resolved = resolve_timestamps(data, utcnow())
        existing = self._coll(collection).get(doc_id)
        self._dirty.add((collection, doc_id))
        if merge and existing is not None:
            existing.update(resolved)
        else:
            self._coll(collection)[doc_id] = resolved

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        existing = self._coll(collection).get(doc_id)
        if existing is None:
            msg = f"No document to update: {collection}/{doc_id}"
            raise DocumentNotFoundError(msg)
        existing.update(resolve_timestamps(data, utcnow()))
        self._dirty.add((collection, doc_id))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._coll(collection).pop(doc_id, None)
        self._dirty.add((collection, doc_id))

    async def commit(self) -> None:
        for collection, doc_id in self._dirty:
            data = self._coll(collection).get(doc_id)
            target = self._committed.setdefault(collection, {})
            if data is None:
                target.pop(doc_id, None)
            else:
                target[doc_id] = copy.deepcopy(data)
        await self.rollback()

    async def rollback(self) -> None:
        self._dirty.clear()
        self._collections = copy.deepcopy(self._committed)
