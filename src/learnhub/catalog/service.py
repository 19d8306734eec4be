"""Catalog service: skills, courses, lessons and resources."""

from __future__ import annotations

import logging

from learnhub.catalog.schemas import (
    CourseCreate,
    CourseUpdate,
    LessonCreate,
    LessonUpdate,
    ResourceCreate,
    SkillCreate,
    SkillUpdate,
)
from learnhub.entities import (
    COURSES,
    LESSONS,
    QUIZZES,
    RESOURCES,
    SKILLS,
    Course,
    Lesson,
    Quiz,
    Resource,
    Skill,
)
from learnhub.errors import NotFoundError, ValidationError
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Repository
from learnhub.store.codec import build_patch

logger = logging.getLogger(__name__)


def _require(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


class CatalogService:
    """Admin-managed learning catalog."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.skills = Repository(store, SKILLS, Skill)
        self.courses = Repository(store, COURSES, Course)
        self.lessons = Repository(store, LESSONS, Lesson)
        self.quizzes = Repository(store, QUIZZES, Quiz)
        self.resources = Repository(store, RESOURCES, Resource)

    # --- Skills ---

    async def list_skills(self) -> list[Skill]:
        return await self.skills.list_all()

    async def global_skills(self) -> list[Skill]:
        return [s for s in await self.skills.list_all() if s.is_global]

    async def get_skill(self, skill_id: str) -> Skill | None:
        return await self.skills.get(skill_id)

    async def require_skill(self, skill_id: str) -> Skill:
        skill = await self.skills.get(skill_id)
        if skill is None:
            raise NotFoundError("Skill not found")
        return skill

    async def create_skill(self, data: SkillCreate) -> str:
        """Create a global catalog skill (no owner)."""
        skill = Skill(
            name=_require(data.name, "Skill name is required"),
            description=data.description.strip(),
        )
        skill_id = await self.skills.create(skill, stamp=("createdAt", "updatedAt"))
        logger.info("Skill created: %s", skill_id)
        return skill_id

    async def update_skill(self, skill_id: str, data: SkillUpdate) -> None:
        await self.require_skill(skill_id)
        patch = build_patch(data)
        if "name" in patch:
            patch["name"] = _require(patch["name"], "Skill name is required")
        patch["updatedAt"] = SERVER_TIMESTAMP
        await self.skills.update(skill_id, patch)

    async def delete_skill(self, skill_id: str) -> None:
        await self.skills.delete(skill_id)

    async def skill_courses(self, skill_id: str) -> list[Course]:
        return await self.courses.find(skillId=skill_id)

    async def skill_quizzes(self, skill_id: str) -> list[Quiz]:
        return await self.quizzes.find(skillId=skill_id)

    # --- Courses ---

    async def list_courses(self) -> list[Course]:
        return await self.courses.list_all()

    async def get_course(self, course_id: str) -> Course | None:
        return await self.courses.get(course_id)

    async def require_course(self, course_id: str) -> Course:
        course = await self.courses.get(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    async def create_course(self, data: CourseCreate) -> str:
        title = _require(data.title, "Course title is required")
        skill_id = _require(data.skill_id, "Course skill is required")
        external_url = (data.external_url or "").strip() or None
        if data.type == "external" and external_url is None:
            raise ValidationError("External courses need a URL")
        await self.require_skill(skill_id)

        course = Course(
            title=title,
            description=data.description.strip(),
            skill_id=skill_id,
            type=data.type,
            external_url=external_url,
            lessons=[] if data.type == "internal" else None,
            quizzes=[],
            resources=[],
        )
        return await self.courses.create(course, stamp=("createdAt",))

    async def update_course(self, course_id: str, data: CourseUpdate) -> None:
        await self.require_course(course_id)
        patch = build_patch(data)
        if "title" in patch:
            patch["title"] = _require(patch["title"], "Course title is required")
        if "skillId" in patch:
            patch["skillId"] = _require(patch["skillId"], "Course skill is required")
        if "externalUrl" in patch:
            patch["externalUrl"] = (patch["externalUrl"] or "").strip() or None
        await self.courses.update(course_id, patch)

    async def delete_course(self, course_id: str) -> None:
        await self.courses.delete(course_id)

    # --- Lessons ---

    async def get_lesson(self, lesson_id: str) -> Lesson | None:
        return await self.lessons.get(lesson_id)

    async def course_lessons(self, course_id: str) -> list[Lesson]:
        """Lessons of a course by ascending ``order``; unordered lessons last."""
        return await self.lessons.find_ordered("order", courseId=course_id)

    async def add_lesson(self, data: LessonCreate) -> str:
        title = _require(data.title, "Lesson title is required")
        course_id = _require(data.course_id, "Lesson course is required")
        if data.order is None:
            raise ValidationError("Lesson order is required")
        if data.content_type is None:
            raise ValidationError("Lesson content type is required")
        course = await self.require_course(course_id)

        lesson = Lesson(
            title=title,
            content=data.content or "",
            content_url=(data.content_url or "").strip() or None,
            course_id=course_id,
            order=data.order,
            duration=data.duration,
            content_type=data.content_type,
        )
        lesson_id = await self.lessons.create(lesson, stamp=("createdAt",))
        await self.courses.update(course_id, {"lessons": [*(course.lessons or []), lesson_id]})
        return lesson_id

    async def update_lesson(self, lesson_id: str, data: LessonUpdate) -> None:
        if await self.lessons.get(lesson_id) is None:
            raise NotFoundError("Lesson not found")
        patch = build_patch(data)
        if "title" in patch:
            patch["title"] = _require(patch["title"], "Lesson title is required")
        await self.lessons.update(lesson_id, patch)

    async def delete_lesson(self, lesson_id: str) -> None:
        lesson = await self.lessons.get(lesson_id)
        if lesson is not None:
            course = await self.courses.get(lesson.course_id)
            if course is not None and course.lessons:
                await self.courses.update(
                    course.id, {"lessons": [i for i in course.lessons if i != lesson_id]}
                )
        await self.lessons.delete(lesson_id)

    async def reorder_lessons(self, lesson_ids: list[str]) -> None:
        """Assign orders 1..n following ``lesson_ids``."""
        for position, lesson_id in enumerate(lesson_ids, start=1):
            await self.lessons.update(lesson_id, {"order": position})

    # --- Resources ---

    async def add_resource(self, course_id: str, data: ResourceCreate) -> str:
        course = await self.require_course(course_id)
        resource = Resource(
            course_id=course_id,
            type=data.type,
            url=_require(data.url, "Resource URL is required"),
            title=_require(data.title, "Resource title is required"),
            description=data.description,
        )
        resource_id = await self.resources.create(resource, stamp=("createdAt",))
        await self.courses.update(course_id, {"resources": [*(course.resources or []), resource_id]})
        return resource_id

    async def course_resources(self, course_id: str) -> list[Resource]:
        return await self.resources.find(courseId=course_id)

    async def delete_resource(self, resource_id: str) -> None:
        resource = await self.resources.get(resource_id)
        if resource is not None:
            course = await self.courses.get(resource.course_id)
            if course is not None and course.resources:
                await self.courses.update(
                    course.id, {"resources": [i for i in course.resources if i != resource_id]}
                )
        await self.resources.delete(resource_id)
