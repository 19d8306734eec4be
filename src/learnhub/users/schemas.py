"""Request bodies for profile endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from learnhub.schemas import ApiModel


class ProfileUpdateRequest(ApiModel):
    name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar: str | None = None


class RoleUpdateRequest(ApiModel):
    role: Literal["user", "admin"]
