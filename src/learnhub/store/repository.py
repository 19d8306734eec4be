"""Typed per-collection access built on a DocumentStore."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import structlog

from learnhub.store.base import SERVER_TIMESTAMP, DocumentStore, Filter, MissingIndexError, OrderBy
from learnhub.store.codec import DocumentModel, build_payload
from learnhub.store.memory import sort_key

logger = structlog.get_logger()

T = TypeVar("T", bound=DocumentModel)


def _filters(filters: dict[str, Any]) -> list[Filter]:
    return [Filter(field, value) for field, value in filters.items()]


class Repository(Generic[T]):
    """list/get/find/create/update/delete for one collection."""

    def __init__(self, store: DocumentStore, collection: str, model: type[T]) -> None:
        self.store = store
        self.collection = collection
        self.model = model

    def _decode(self, docs: list) -> list[T]:
        return [self.model.from_document(d) for d in docs]

    async def list_all(self) -> list[T]:
        return self._decode(await self.store.query(self.collection))

    async def get(self, doc_id: str) -> T | None:
        if not doc_id:
            return None
        doc = await self.store.get(self.collection, doc_id)
        return self.model.from_document(doc) if doc else None

    async def find(self, **filters: Any) -> list[T]:
        """Equality query; keyword names are stored (camelCase) field names."""
        return self._decode(await self.store.query(self.collection, _filters(filters)))

    async def find_one(self, **filters: Any) -> T | None:
        docs = await self.store.query(self.collection, _filters(filters), limit=1)
        return self.model.from_document(docs[0]) if docs else None

    async def find_where(self, *filters: Filter) -> list[T]:
        return self._decode(await self.store.query(self.collection, list(filters)))

    async def find_ordered(
        self,
        order_field: str,
        descending: bool = False,
        limit: int | None = None,
        key: Callable[[dict[str, Any]], Any] | None = None,
        **filters: Any,
    ) -> list[T]:
        """Ordered query, falling back to an unordered fetch plus stable in-memory sort.

        Documents lacking ``order_field`` sort last in ascending order.
        """
        try:
            docs = await self.store.query(
                self.collection,
                _filters(filters),
                order_by=OrderBy(order_field, descending),
                limit=limit,
            )
        except MissingIndexError as exc:
            logger.warning(
                "ordered_query_fallback",
                collection=self.collection,
                order_field=order_field,
                error=str(exc),
            )
            docs = await self.store.query(self.collection, _filters(filters))
            sort_by = key or (lambda data: sort_key(data.get(order_field)))
            if descending:
                present = [d for d in docs if d.data.get(order_field) is not None]
                missing = [d for d in docs if d.data.get(order_field) is None]
                present.sort(key=lambda d: sort_by(d.data), reverse=True)
                docs = present + missing
            else:
                docs.sort(key=lambda d: sort_by(d.data))
            if limit is not None:
                docs = docs[:limit]
        return self._decode(docs)

    async def create(self, entity: T, stamp: tuple[str, ...] = ()) -> str:
        """Insert ``entity``; fields named in ``stamp`` are set to the server clock."""
        payload = build_payload(entity)
        payload.update(dict.fromkeys(stamp, SERVER_TIMESTAMP))
        return await self.store.add(self.collection, payload)

    async def put(
        self,
        doc_id: str,
        entity: T,
        merge: bool = False,
        stamp: tuple[str, ...] = (),
    ) -> None:
        payload = build_payload(entity)
        payload.update(dict.fromkeys(stamp, SERVER_TIMESTAMP))
        await self.store.set(self.collection, doc_id, payload, merge=merge)

    async def update(self, doc_id: str, data: dict[str, Any]) -> None:
        await self.store.update(self.collection, doc_id, data)

    async def delete(self, doc_id: str) -> None:
        await self.store.delete(self.collection, doc_id)

    async def count(self) -> int:
        return len(await self.store.query(self.collection))
