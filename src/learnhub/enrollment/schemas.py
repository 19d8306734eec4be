"""Response bodies for enrollment endpoints."""

from __future__ import annotations

from learnhub.entities import Skill, UserSkillProgress
from learnhub.schemas import ApiModel


class AvailableSkill(ApiModel):
    skill: Skill
    course_count: int
    progress: UserSkillProgress | None = None
