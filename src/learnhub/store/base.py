"""Document store interface: collections of JSON documents addressed by id."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class StoreError(Exception):
    """Base class for document store failures."""


class MissingIndexError(StoreError):
    """An ordered query needs a composite index that has not been declared."""


class DocumentNotFoundError(StoreError):
    """Partial update of a document that does not exist."""


class _ServerTimestamp:
    """Placeholder replaced with the store clock when a document is written."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Filter:
    """Single-field filter. ``op`` is ``==`` or ``!=``; ``None`` matches a missing field."""

    field: str
    value: Any
    op: str = "=="

    def matches(self, data: dict[str, Any]) -> bool:
        actual = data.get(self.field)
        if self.op == "==":
            return actual == self.value
        if self.op == "!=":
            return actual != self.value
        msg = f"Unsupported filter operator: {self.op}"
        raise StoreError(msg)


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class IndexSpec:
    """Composite index: equality filters on ``fields`` ordered by ``order_field``."""

    collection: str
    fields: tuple[str, ...]
    order_field: str

    @classmethod
    def parse(cls, spec: str) -> IndexSpec:
        """Parse ``collection:field1,field2:order_field``."""
        try:
            collection, fields, order_field = spec.split(":")
        except ValueError:
            msg = f"Invalid index spec: {spec!r}"
            raise ValueError(msg) from None
        return cls(
            collection=collection,
            fields=tuple(sorted(f for f in fields.split(",") if f)),
            order_field=order_field,
        )


@dataclass
class Document:
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_timestamps(data: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Replace SERVER_TIMESTAMP placeholders and encode datetimes as ISO strings."""
    resolved: dict[str, Any] = {}
    for key, value in data.items():
        resolved[key] = _encode_value(value, now)
    return resolved


def _encode_value(value: Any, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return now.isoformat()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    if isinstance(value, dict):
        return {k: _encode_value(v, now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v, now) for v in value]
    return value


class DocumentStore(ABC):
    """Async document store scoped to one backend project."""

    def __init__(self, indexes: Iterable[IndexSpec] = ()) -> None:
        self._indexes = set(indexes)

    def check_index(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: OrderBy | None,
    ) -> None:
        """Raise MissingIndexError when the query needs an undeclared composite index.

        Ordering alone, or ordering on the only filtered field, is always served.
        """
        if order_by is None or not filters:
            return
        filter_fields = tuple(sorted({f.field for f in filters}))
        if filter_fields == (order_by.field,):
            return
        if IndexSpec(collection, filter_fields, order_by.field) in self._indexes:
            return
        msg = (
            f"The query requires an index: collection={collection} "
            f"fields={','.join(filter_fields)} order={order_by.field}"
        )
        raise MissingIndexError(msg)

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Fetch one document or None."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Return documents matching every filter."""

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a document under a new id and return the id."""

    @abstractmethod
    async def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Create or replace a document; ``merge`` keeps fields not in ``data``."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Partially update an existing document."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document; absent ids are ignored."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending writes."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DocumentStore]:
        """Group writes: commit on success, roll back on any exception."""
        try:
            yield self
        except BaseException:
            await self.rollback()
            raise
        await self.commit()
