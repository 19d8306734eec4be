"""Request bodies for catalog administration."""

from __future__ import annotations

from typing import Literal

from learnhub.schemas import ApiModel


class SkillCreate(ApiModel):
    name: str = ""
    description: str = ""


class SkillUpdate(ApiModel):
    name: str | None = None
    description: str | None = None


class CourseCreate(ApiModel):
    title: str = ""
    description: str = ""
    skill_id: str = ""
    type: Literal["internal", "external"] = "internal"
    external_url: str | None = None


class CourseUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    skill_id: str | None = None
    type: Literal["internal", "external"] | None = None
    external_url: str | None = None


class LessonCreate(ApiModel):
    title: str = ""
    content: str = ""
    content_url: str | None = None
    course_id: str = ""
    order: int | None = None
    duration: int | None = None
    content_type: Literal["text", "video", "pdf"] | None = None


class LessonUpdate(ApiModel):
    title: str | None = None
    content: str | None = None
    content_url: str | None = None
    order: int | None = None
    duration: int | None = None
    content_type: Literal["text", "video", "pdf"] | None = None


class LessonReorder(ApiModel):
    lesson_ids: list[str]


class ResourceCreate(ApiModel):
    type: Literal["video", "article", "document", "link"] = "link"
    url: str = ""
    title: str = ""
    description: str | None = None
