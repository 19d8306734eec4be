"""SQLAlchemy-backed document store over the 'documents' table."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import ColumnElement, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.db.models import DocumentRow
from learnhub.store.base import (
    Document,
    DocumentNotFoundError,
    DocumentStore,
    Filter,
    IndexSpec,
    OrderBy,
    StoreError,
    resolve_timestamps,
    utcnow,
)


def _field_expr(field: str, value: Any) -> ColumnElement[Any]:
    """Typed accessor for a JSON field, chosen from the comparison value."""
    element = DocumentRow.data[field]
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, int):
        return element.as_integer()
    if isinstance(value, float):
        return element.as_float()
    return element.as_string()


def _order_expr(field: str) -> ColumnElement[Any]:
    """Timestamp fields (``*At``) hold ISO strings; other sort keys are numeric."""
    element = DocumentRow.data[field]
    if field.endswith("At"):
        return element.as_string()
    return element.as_float()


def _filter_clause(f: Filter) -> ColumnElement[bool]:
    expr = _field_expr(f.field, f.value)
    if f.op == "==":
        if f.value is None:
            return expr.is_(None)
        return expr == f.value
    if f.op == "!=":
        if f.value is None:
            return expr.is_not(None)
        return or_(expr.is_(None), expr != f.value)
    msg = f"Unsupported filter operator: {f.op}"
    raise StoreError(msg)


class SqlDocumentStore(DocumentStore):
    """Document store bound to one AsyncSession and one backend project.

    Writes are flushed immediately and become durable on commit().
    """

    def __init__(
        self,
        session: AsyncSession,
        project: str,
        indexes: Iterable[IndexSpec] = (),
    ) -> None:
        super().__init__(indexes)
        self.session = session
        self.project = project

    async def _row(self, collection: str, doc_id: str) -> DocumentRow | None:
        return await self.session.get(DocumentRow, (self.project, collection, doc_id))

    async def get(self, collection: str, doc_id: str) -> Document | None:
        row = await self._row(collection, doc_id)
        if row is None:
            return None
        return Document(id=row.id, data=dict(row.data))

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        self.check_index(collection, filters, order_by)
        stmt = select(DocumentRow).where(
            DocumentRow.project == self.project,
            DocumentRow.collection == collection,
            *(_filter_clause(f) for f in filters),
        )
        if order_by is not None:
            element = _order_expr(order_by.field)
            ordering = element.desc() if order_by.descending else element.asc()
            stmt = stmt.order_by(ordering.nulls_last(), DocumentRow.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [Document(id=row.id, data=dict(row.data)) for row in result.scalars()]

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self.session.add(
            DocumentRow(
                project=self.project,
                collection=collection,
                id=doc_id,
                data=resolve_timestamps(data, utcnow()),
            )
        )
        await self.session.flush()
        return doc_id

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        resolved = resolve_timestamps(data, utcnow())
        row = await self._row(collection, doc_id)
        if row is None:
            self.session.add(
                DocumentRow(project=self.project, collection=collection, id=doc_id, data=resolved)
            )
        elif merge:
            row.data = {**row.data, **resolved}
        else:
            row.data = resolved
        await self.session.flush()

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        row = await self._row(collection, doc_id)
        if row is None:
            msg = f"No document to update: {collection}/{doc_id}"
            raise DocumentNotFoundError(msg)
        row.data = {**row.data, **resolve_timestamps(data, utcnow())}
        await self.session.flush()

    async def delete(self, collection: str, doc_id: str) -> None:
        await self.session.execute(
            delete(DocumentRow).where(
                DocumentRow.project == self.project,
                DocumentRow.collection == collection,
                DocumentRow.id == doc_id,
            )
        )

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
