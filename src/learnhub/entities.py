"""Stored entities, one model per collection.

Field names are snake_case here and camelCase in the store (``skill_id`` is
stored as ``skillId``). Timestamps come back as timezone-aware datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from learnhub.store.codec import DocumentModel

# --- Collection names ---

USERS = "users"
CREDENTIALS = "credentials"
SKILLS = "skills"
COURSES = "courses"
LESSONS = "lessons"
QUIZZES = "quizzes"
QUESTIONS = "questions"
RESPONSES = "responses"
PROGRESS = "progress"
BADGES = "badges"
GOALS = "goals"
NOTIFICATIONS = "notifications"
FAVORITES = "favorites"
RESOURCES = "resources"
VALIDATED_SKILLS = "validatedSkills"
USER_SKILL_PROGRESS = "userSkillProgress"

GLOBAL_SKILL_OWNERS = ("", "admin")


# --- Users ---


class User(DocumentModel):
    name: str
    email: str
    role: Literal["user", "admin"] = "user"
    bio: str | None = None
    avatar: str | None = None
    skills: list[str] = []
    goals: list[str] = []
    badges: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Credential(DocumentModel):
    """Login credential; the document id is the normalised email."""

    email: str
    password_hash: str
    user_id: str
    created_at: datetime | None = None


# --- Catalog ---


class Skill(DocumentModel):
    name: str
    description: str = ""
    user_id: str | None = None
    courses: list[str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_global(self) -> bool:
        return self.user_id is None or self.user_id in GLOBAL_SKILL_OWNERS


class Course(DocumentModel):
    title: str
    description: str = ""
    skill_id: str
    type: Literal["internal", "external"] = "internal"
    external_url: str | None = None
    lessons: list[str] | None = None
    quizzes: list[str] | None = None
    resources: list[str] | None = None
    created_at: datetime | None = None


class Lesson(DocumentModel):
    title: str
    content: str = ""
    content_url: str | None = None
    course_id: str
    order: int | None = None
    duration: int | None = None
    content_type: Literal["text", "video", "pdf"] = "text"
    created_at: datetime | None = None


class Resource(DocumentModel):
    course_id: str
    type: Literal["video", "article", "document", "link"] = "link"
    url: str
    title: str
    description: str | None = None
    created_at: datetime | None = None


class Quiz(DocumentModel):
    title: str
    skill_id: str | None = None
    course_id: str | None = None
    passing_score: int = 80
    time_limit: int | None = None
    questions: list[str] | None = None
    created_at: datetime | None = None


class Question(DocumentModel):
    content: str
    quiz_id: str
    type: Literal["multiple_choice", "true_false", "text"] = "multiple_choice"
    options: list[str] | None = None
    correct_answer: str
    points: int = 1
    order: int | None = None


class QuizResponse(DocumentModel):
    user_id: str
    quiz_id: str
    question_id: str
    user_answer: str
    is_correct: bool
    submitted_at: datetime | None = None


# --- Progress ---


class Progress(DocumentModel):
    """Completion record for exactly one lesson, course or quiz."""

    user_id: str
    lesson_id: str | None = None
    course_id: str | None = None
    quiz_id: str | None = None
    parent_course_id: str | None = None
    percentage: int = 0
    completed: bool = False
    started_at: datetime | None = None
    last_accessed_at: datetime | None = None
    completed_at: datetime | None = None


class UserSkillProgress(DocumentModel):
    user_id: str
    skill_id: str
    level: int = 0
    courses_completed: int = 0
    total_courses: int = 0
    enrolled_at: datetime | None = None
    last_accessed_at: datetime | None = None


# --- Badges ---


class _ConditionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # skills the badge is linked to, on any condition type
    skill_ids: list[str] | None = None


class CompleteSkillsCondition(_ConditionModel):
    type: Literal["complete_skills"] = "complete_skills"
    value: int


class QuizScoreCondition(_ConditionModel):
    type: Literal["quiz_score"] = "quiz_score"
    value: int
    quiz_id: str | None = None


class CompleteCoursesCondition(_ConditionModel):
    type: Literal["complete_courses"] = "complete_courses"
    value: int


class CustomCondition(_ConditionModel):
    type: Literal["custom"] = "custom"
    value: int = 0


BadgeCondition = Annotated[
    Union[CompleteSkillsCondition, QuizScoreCondition, CompleteCoursesCondition, CustomCondition],
    Field(discriminator="type"),
]


class Badge(DocumentModel):
    """Catalog badge, or a per-user claim when ``user_id`` is set."""

    title: str
    description: str = ""
    icon: str | None = None
    color: str | None = None
    image: str | None = None
    skill_id: str | None = None
    conditions: BadgeCondition | None = None
    template_id: str | None = None
    user_id: str | None = None
    unlocked_at: datetime | None = None

    @property
    def catalog_id(self) -> str | None:
        return self.template_id or self.id


class ValidatedSkill(DocumentModel):
    user_id: str
    skill_id: str
    skill_name: str
    validated_at: datetime | None = None
    quiz_score: int = 0
    badges_unlocked: list[str] = []


# --- Goals, notifications, favorites ---


class Goal(DocumentModel):
    user_id: str
    target: str
    description: str | None = None
    target_date: datetime | None = None
    skill_id: str | None = None
    completed: bool = False
    created_at: datetime | None = None


class Notification(DocumentModel):
    user_id: str
    content: str
    type: Literal["achievement", "reminder", "progress", "system"] = "system"
    read: bool = False
    related_id: str | None = None
    created_at: datetime | None = None


class Favorite(DocumentModel):
    user_id: str
    item_type: Literal["course", "skill", "resource"]
    item_id: str
    created_at: datetime | None = None
