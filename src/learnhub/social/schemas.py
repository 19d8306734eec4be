"""Request bodies for goals, notifications and favorites."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from learnhub.schemas import ApiModel


class GoalCreate(ApiModel):
    target: str = ""
    description: str | None = None
    target_date: datetime | None = None
    skill_id: str | None = None


class GoalUpdate(ApiModel):
    target: str | None = None
    description: str | None = None
    target_date: datetime | None = None
    skill_id: str | None = None
    completed: bool | None = None


class FavoriteRequest(ApiModel):
    item_type: Literal["course", "skill", "resource"]
    item_id: str


class FavoriteStatus(ApiModel):
    is_favorite: bool
