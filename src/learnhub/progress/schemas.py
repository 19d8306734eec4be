"""Response bodies for progress endpoints."""

from __future__ import annotations

from learnhub.entities import Progress, UserSkillProgress
from learnhub.schemas import ApiModel


class CourseCompletionResponse(ApiModel):
    course_id: str
    percentage: int
    total_lessons: int
    completed_lessons: int
    all_lessons_completed: bool
    course_completed: bool
    progress: Progress | None = None


class CompletionEventResponse(ApiModel):
    progress_id: str
    skill_progress: UserSkillProgress | None = None
