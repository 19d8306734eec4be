"""Progress service: per-user lesson, course and quiz completion records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import structlog

from learnhub.entities import COURSES, LESSONS, PROGRESS, Course, Lesson, Progress
from learnhub.errors import NotFoundError, ValidationError
from learnhub.progress.aggregation import course_percentage
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Repository
from learnhub.store.codec import build_payload

logger = structlog.get_logger()

TargetKind = Literal["lesson", "course", "quiz"]

_TARGET_FIELDS = {"lesson": "lessonId", "course": "courseId", "quiz": "quizId"}


@dataclass(frozen=True)
class ProgressTarget:
    """The one lesson, course or quiz a progress record is about."""

    kind: TargetKind
    id: str

    @property
    def field(self) -> str:
        return _TARGET_FIELDS[self.kind]

    @classmethod
    def lesson(cls, lesson_id: str) -> ProgressTarget:
        return cls("lesson", lesson_id)

    @classmethod
    def course(cls, course_id: str) -> ProgressTarget:
        return cls("course", course_id)

    @classmethod
    def quiz(cls, quiz_id: str) -> ProgressTarget:
        return cls("quiz", quiz_id)

    @classmethod
    def from_ids(
        cls,
        lesson_id: str | None = None,
        course_id: str | None = None,
        quiz_id: str | None = None,
    ) -> ProgressTarget:
        """Build a target from optional ids; exactly one must be given."""
        candidates = (("lesson", lesson_id), ("course", course_id), ("quiz", quiz_id))
        given = [(kind, value) for kind, value in candidates if value]
        if len(given) != 1:
            raise ValidationError("Exactly one of lessonId, courseId or quizId is required")
        kind, value = given[0]
        return cls(kind, value)


@dataclass(frozen=True)
class CourseCompletion:
    course_id: str
    percentage: int
    total_lessons: int
    completed_lessons: int
    all_lessons_completed: bool
    course_completed: bool


class ProgressService:
    """One progress record per (user, target); writes update in place."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.progress = Repository(store, PROGRESS, Progress)
        self.lessons = Repository(store, LESSONS, Lesson)
        self.courses = Repository(store, COURSES, Course)

    async def find(self, user_id: str, target: ProgressTarget) -> Progress | None:
        return await self.progress.find_one(**{"userId": user_id, target.field: target.id})

    async def upsert(
        self,
        user_id: str,
        target: ProgressTarget,
        percentage: int,
        completed: bool,
        parent_course_id: str | None = None,
    ) -> str:
        """Create or update the record for (user, target) and return its id.

        ``startedAt`` is set on creation, ``lastAccessedAt`` on every write,
        ``completedAt`` while completed and cleared otherwise. Quiz records may
        be completed below 100% since their pass mark is the quiz's own.
        """
        if not target.id:
            raise ValidationError("lessonId, courseId or quizId is required")
        if not 0 <= percentage <= 100:
            raise ValidationError("Percentage must be between 0 and 100")
        if target.kind != "quiz" and completed != (percentage == 100):
            raise ValidationError("Lessons and courses are completed exactly at 100%")

        existing = await self.find(user_id, target)
        if existing is not None:
            patch = {
                "percentage": percentage,
                "completed": completed,
                "lastAccessedAt": SERVER_TIMESTAMP,
                "completedAt": SERVER_TIMESTAMP if completed else None,
            }
            if parent_course_id:
                patch["parentCourseId"] = parent_course_id
            await self.progress.update(existing.id, patch)
            return existing.id

        record = Progress(
            user_id=user_id,
            parent_course_id=parent_course_id,
            percentage=percentage,
            completed=completed,
            **{f"{target.kind}_id": target.id},
        )
        payload = build_payload(record)
        payload["startedAt"] = SERVER_TIMESTAMP
        payload["lastAccessedAt"] = SERVER_TIMESTAMP
        if completed:
            payload["completedAt"] = SERVER_TIMESTAMP
        return await self.store.add(PROGRESS, payload)

    # --- Lessons ---

    async def start_lesson(self, user_id: str, lesson_id: str, course_id: str) -> str:
        """Open a lesson; an already completed lesson only has its access time bumped."""
        existing = await self.find(user_id, ProgressTarget.lesson(lesson_id))
        if existing is not None and existing.completed:
            await self.progress.update(existing.id, {"lastAccessedAt": SERVER_TIMESTAMP})
            return existing.id
        return await self.upsert(
            user_id, ProgressTarget.lesson(lesson_id), 0, False, parent_course_id=course_id
        )

    async def complete_lesson(self, user_id: str, lesson_id: str, course_id: str) -> str:
        return await self.upsert(
            user_id, ProgressTarget.lesson(lesson_id), 100, True, parent_course_id=course_id
        )

    async def get_lesson_progress(self, user_id: str, lesson_id: str) -> Progress | None:
        return await self.find(user_id, ProgressTarget.lesson(lesson_id))

    # --- Courses ---

    async def start_course(self, user_id: str, course_id: str) -> str:
        existing = await self.find(user_id, ProgressTarget.course(course_id))
        if existing is not None:
            await self.progress.update(existing.id, {"lastAccessedAt": SERVER_TIMESTAMP})
            return existing.id
        return await self.upsert(user_id, ProgressTarget.course(course_id), 0, False)

    async def get_course_progress(self, user_id: str, course_id: str) -> Progress | None:
        return await self.find(user_id, ProgressTarget.course(course_id))

    async def get_course_lessons(self, course_id: str) -> list[Lesson]:
        """Lessons by ascending ``order``; lessons without one come last."""
        return await self.lessons.find_ordered("order", courseId=course_id)

    async def _require_course(self, course_id: str) -> Course:
        course = await self.courses.get(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    async def course_completion(self, user_id: str, course_id: str) -> CourseCompletion:
        return await self._completion(user_id, await self._require_course(course_id))

    async def _completion(self, user_id: str, course: Course) -> CourseCompletion:
        course_id = course.id
        lesson_ids = [lesson.id for lesson in await self.get_course_lessons(course_id)]
        completed_ids = {
            p.lesson_id
            for p in await self.progress.find(userId=user_id, completed=True)
            if p.lesson_id
        }
        done = sum(1 for lesson_id in lesson_ids if lesson_id in completed_ids)
        course_record = await self.get_course_progress(user_id, course_id)
        if course.type == "internal":
            percent = course_percentage(lesson_ids, completed_ids)
        else:
            percent = course_record.percentage if course_record else 0
        return CourseCompletion(
            course_id=course_id,
            percentage=percent,
            total_lessons=len(lesson_ids),
            completed_lessons=done,
            all_lessons_completed=done == len(lesson_ids),
            course_completed=bool(course_record and course_record.completed),
        )

    async def complete_course(self, user_id: str, course_id: str) -> str:
        """Mark a course completed on the user's explicit confirmation.

        Internal courses with lessons need every lesson completed first;
        external courses complete on confirmation alone.
        """
        course = await self._require_course(course_id)
        completion = await self._completion(user_id, course)
        if course.type == "internal" and not completion.all_lessons_completed:
            raise ValidationError("Complete every lesson before finishing the course")
        progress_id = await self.upsert(user_id, ProgressTarget.course(course_id), 100, True)
        logger.info("course_completed", user_id=user_id, course_id=course_id)
        return progress_id

    # --- Quizzes ---

    async def record_quiz_result(self, user_id: str, quiz_id: str, percentage: int, passed: bool) -> str:
        return await self.upsert(user_id, ProgressTarget.quiz(quiz_id), percentage, passed)

    # --- Reads ---

    async def get_user_progress(self, user_id: str) -> list[Progress]:
        """Every record of the user, most recently accessed first."""
        return await self.progress.find_ordered("lastAccessedAt", descending=True, userId=user_id)

    async def get_user_history(self, user_id: str, limit: int | None = None) -> list[Progress]:
        """Completed records, most recently completed first."""
        return await self.progress.find_ordered(
            "completedAt", descending=True, limit=limit, userId=user_id, completed=True
        )

    async def completed_course_ids(self, user_id: str) -> set[str]:
        """Courses with a completed course-level record."""
        return {
            p.course_id
            for p in await self.progress.find(userId=user_id, completed=True)
            if p.course_id and not p.lesson_id
        }

    async def delete(self, progress_id: str) -> None:
        await self.progress.delete(progress_id)
