"""Response bodies for admin dashboards."""

from __future__ import annotations

from datetime import datetime

from learnhub.schemas import ApiModel


class DailyCount(ApiModel):
    date: str
    count: int


class DashboardStats(ApiModel):
    total_users: int
    total_skills: int
    total_courses: int
    total_quizzes: int
    total_badges: int
    new_users_this_week: int
    completions_by_date: list[DailyCount]


class ProgressReportEntry(ApiModel):
    """A progress record with the display names an admin needs."""

    id: str
    user_id: str
    user_name: str
    lesson_id: str | None = None
    course_id: str | None = None
    quiz_id: str | None = None
    quiz_title: str | None = None
    skill_name: str | None = None
    percentage: int
    completed: bool
    started_at: datetime | None = None
    last_accessed_at: datetime | None = None
    completed_at: datetime | None = None
