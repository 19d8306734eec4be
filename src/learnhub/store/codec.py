"""Translate pydantic entities to and from stored document shape."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from learnhub.store.base import Document

M = TypeVar("M", bound="DocumentModel")


class DocumentModel(BaseModel):
    """Base for stored entities: snake_case in Python, camelCase in the store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str | None = None

    @classmethod
    def from_document(cls: type[M], doc: Document) -> M:
        return cls.model_validate({**doc.data, "id": doc.id})


def build_payload(model: BaseModel) -> dict[str, Any]:
    """Serialise only the fields that hold a value.

    Optional attributes left as None are omitted, never written as null.
    """
    return model.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)


def build_patch(model: BaseModel) -> dict[str, Any]:
    """Serialise the fields the caller explicitly set, including explicit None.

    Used for partial updates, where an explicit None clears a stored field.
    """
    return model.model_dump(by_alias=True, exclude={"id"}, exclude_unset=True)
