"""Request and response bodies for badge and validation endpoints."""

from __future__ import annotations

from learnhub.entities import Badge, BadgeCondition, ValidatedSkill
from learnhub.schemas import ApiModel


class BadgeCreate(ApiModel):
    title: str = ""
    description: str = ""
    icon: str | None = None
    color: str | None = None
    image: str | None = None
    skill_id: str | None = None
    conditions: BadgeCondition | None = None


class BadgeUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    image: str | None = None
    skill_id: str | None = None
    conditions: BadgeCondition | None = None


class ValidationOutcomeResponse(ApiModel):
    skill_validated: bool
    badges_unlocked: list[Badge] = []


class UserBadgesResponse(ApiModel):
    badges: list[Badge]
    total_available: int
    total_unlocked: int


class ValidatedSkillsResponse(ApiModel):
    validated_skills: list[ValidatedSkill]
