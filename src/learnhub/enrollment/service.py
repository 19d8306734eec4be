"""Enrollment in skills and the derived per-skill level."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from learnhub.entities import (
    COURSES,
    PROGRESS,
    SKILLS,
    USER_SKILL_PROGRESS,
    VALIDATED_SKILLS,
    Course,
    Progress,
    Skill,
    UserSkillProgress,
    ValidatedSkill,
)
from learnhub.errors import ConflictError, NotFoundError, ValidationError
from learnhub.progress.aggregation import completed_count, skill_level
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Repository

logger = structlog.get_logger()


@dataclass(frozen=True)
class SkillWithProgress:
    skill: Skill
    course_count: int
    progress: UserSkillProgress | None


class EnrollmentService:
    """Enroll/unenroll users and re-derive their skill levels from progress records."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.skills = Repository(store, SKILLS, Skill)
        self.courses = Repository(store, COURSES, Course)
        self.progress = Repository(store, PROGRESS, Progress)
        self.skill_progress = Repository(store, USER_SKILL_PROGRESS, UserSkillProgress)
        self.validated = Repository(store, VALIDATED_SKILLS, ValidatedSkill)

    async def _course_ids(self, skill_id: str) -> list[str]:
        return [c.id for c in await self.courses.find(skillId=skill_id)]

    async def _completed_course_ids(self, user_id: str) -> set[str]:
        return {
            p.course_id
            for p in await self.progress.find(userId=user_id, completed=True)
            if p.course_id and not p.lesson_id
        }

    async def find(self, user_id: str, skill_id: str) -> UserSkillProgress | None:
        return await self.skill_progress.find_one(userId=user_id, skillId=skill_id)

    async def _validated_since(self, record: UserSkillProgress) -> bool:
        validated = await self.validated.find_one(userId=record.user_id, skillId=record.skill_id)
        if validated is None:
            return False
        if record.enrolled_at is None or validated.validated_at is None:
            return True
        return validated.validated_at >= record.enrolled_at

    async def get_user_skill_progress(self, user_id: str, skill_id: str) -> UserSkillProgress | None:
        """Enrollment record with its level re-derived from current progress.

        A skill validated by a passing quiz during the current enrollment
        stays at 100 even when fewer courses are completed.
        """
        record = await self.find(user_id, skill_id)
        if record is None:
            return None
        course_ids = await self._course_ids(skill_id)
        completed_ids = await self._completed_course_ids(user_id)
        level = skill_level(course_ids, completed_ids)
        if level < 100 and await self._validated_since(record):
            level = 100
        return record.model_copy(
            update={
                "level": level,
                "courses_completed": completed_count(course_ids, completed_ids),
                "total_courses": len(course_ids),
            }
        )

    async def recompute(self, user_id: str, skill_id: str) -> UserSkillProgress | None:
        """Persist the re-derived level and counts; None when not enrolled."""
        current = await self.get_user_skill_progress(user_id, skill_id)
        if current is None:
            return None
        await self.skill_progress.update(
            current.id,
            {
                "level": current.level,
                "coursesCompleted": current.courses_completed,
                "totalCourses": current.total_courses,
                "lastAccessedAt": SERVER_TIMESTAMP,
            },
        )
        logger.debug("skill_level_recomputed", user_id=user_id, skill_id=skill_id, level=current.level)
        return current

    async def recompute_for_course(self, user_id: str, course_id: str) -> UserSkillProgress | None:
        """Recompute the skill owning ``course_id`` after a completion event."""
        course = await self.courses.get(course_id)
        if course is None:
            return None
        return await self.recompute(user_id, course.skill_id)

    async def enroll(self, user_id: str, skill_id: str) -> str:
        if not skill_id:
            raise ValidationError("Skill is required")
        if await self.skills.get(skill_id) is None:
            raise NotFoundError("Skill not found")
        if await self.find(user_id, skill_id) is not None:
            raise ConflictError("Already enrolled in this skill")
        course_ids = await self._course_ids(skill_id)
        if not course_ids:
            raise ValidationError("This skill has no courses yet")

        record = UserSkillProgress(
            user_id=user_id,
            skill_id=skill_id,
            level=0,
            courses_completed=0,
            total_courses=len(course_ids),
        )
        record_id = await self.skill_progress.create(record, stamp=("enrolledAt", "lastAccessedAt"))
        logger.info("skill_enrolled", user_id=user_id, skill_id=skill_id)
        return record_id

    async def unenroll(self, user_id: str, skill_id: str) -> int:
        """Remove the enrollment and every course and lesson record under the skill.

        Returns the number of progress records deleted.
        """
        record = await self.find(user_id, skill_id)
        if record is None:
            raise NotFoundError("Not enrolled in this skill")
        course_ids = set(await self._course_ids(skill_id))
        removed = 0
        for progress in await self.progress.find(userId=user_id):
            owner = progress.parent_course_id if progress.lesson_id else progress.course_id
            if owner in course_ids:
                await self.progress.delete(progress.id)
                removed += 1
        await self.skill_progress.delete(record.id)
        logger.info("skill_unenrolled", user_id=user_id, skill_id=skill_id, progress_removed=removed)
        return removed

    async def available_skills(self, user_id: str) -> list[SkillWithProgress]:
        """Global skills that have at least one course, with the user's enrollment if any."""
        courses = await self.courses.list_all()
        counts: dict[str, int] = {}
        for course in courses:
            counts[course.skill_id] = counts.get(course.skill_id, 0) + 1
        enrolled = {p.skill_id: p for p in await self.skill_progress.find(userId=user_id)}
        return [
            SkillWithProgress(skill=s, course_count=counts[s.id], progress=enrolled.get(s.id))
            for s in await self.skills.list_all()
            if s.is_global and counts.get(s.id)
        ]

    async def enrolled_skills(self, user_id: str) -> list[UserSkillProgress]:
        return await self.skill_progress.find(userId=user_id)

    async def force_level(self, user_id: str, skill_id: str, level: int) -> str:
        """Set the level directly, enrolling the user first when needed."""
        record = await self.find(user_id, skill_id)
        if record is not None:
            await self.skill_progress.update(
                record.id, {"level": level, "lastAccessedAt": SERVER_TIMESTAMP}
            )
            return record.id
        course_ids = await self._course_ids(skill_id)
        created = UserSkillProgress(
            user_id=user_id,
            skill_id=skill_id,
            level=level,
            courses_completed=completed_count(course_ids, await self._completed_course_ids(user_id)),
            total_courses=len(course_ids),
        )
        return await self.skill_progress.create(created, stamp=("enrolledAt", "lastAccessedAt"))
