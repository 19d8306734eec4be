"""Skill validation after a passing quiz, and the badge unlocks it triggers."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from learnhub.entities import PROGRESS, SKILLS, Badge, Progress, Skill
from learnhub.enrollment.service import EnrollmentService
from learnhub.errors import NotFoundError
from learnhub.gamification.badge_service import BadgeService
from learnhub.gamification.conditions import Facts, evaluate_condition
from learnhub.gamification.validated_skills import ValidatedSkillService
from learnhub.store import DocumentStore, Repository

logger = structlog.get_logger()


@dataclass
class ValidationOutcome:
    skill_validated: bool
    badges_unlocked: list[Badge] = field(default_factory=list)


class SkillValidationService:
    """Marks a skill validated and unlocks the badges the user now qualifies for.

    The whole chain runs in one store transaction.
    """

    def __init__(self, store: DocumentStore, redis: object = None) -> None:
        self.store = store
        self.skills = Repository(store, SKILLS, Skill)
        self.progress = Repository(store, PROGRESS, Progress)
        self.enrollment = EnrollmentService(store)
        self.badges = BadgeService(store, redis)
        self.validated = ValidatedSkillService(store)

    async def _facts(self, user_id: str, skill_id: str, quiz_percentage: int, quiz_id: str | None) -> Facts:
        """Facts with every enrolled skill level re-derived from current progress.

        The skill being validated counts as completed.
        """
        completed_skills = {skill_id}
        for record in await self.enrollment.enrolled_skills(user_id):
            current = await self.enrollment.get_user_skill_progress(user_id, record.skill_id)
            if current is not None and current.level >= 100:
                completed_skills.add(record.skill_id)
        completed_courses = {
            p.course_id
            for p in await self.progress.find(userId=user_id, completed=True)
            if p.course_id and not p.lesson_id
        }
        return Facts(
            quiz_percentage=quiz_percentage,
            quiz_id=quiz_id,
            completed_skills=len(completed_skills),
            completed_courses=len(completed_courses),
        )

    async def validate_skill(
        self,
        user_id: str,
        skill_id: str,
        quiz_percentage: int,
        quiz_id: str | None = None,
    ) -> ValidationOutcome:
        """Validate ``skill_id`` for a user who passed its quiz.

        Returns only the badges unlocked by this call.
        """
        skill = await self.skills.get(skill_id)
        if skill is None:
            raise NotFoundError("Skill not found")

        async with self.store.transaction():
            await self.enrollment.force_level(user_id, skill_id, 100)

            facts = await self._facts(user_id, skill_id, quiz_percentage, quiz_id)
            held = await self.badges.held_badge_ids(user_id)
            unlocked: list[Badge] = []
            for badge in await self.badges.skill_badges(skill_id):
                if badge.id in held or badge.conditions is None:
                    continue
                if not evaluate_condition(badge.conditions, facts):
                    continue
                if await self.badges.unlock(user_id, badge):
                    unlocked.append(badge)

            await self.validated.record(
                user_id,
                skill_id,
                skill.name,
                quiz_percentage,
                [b.id for b in unlocked],
            )

        logger.info(
            "skill_validated",
            user_id=user_id,
            skill_id=skill_id,
            quiz_percentage=quiz_percentage,
            badges_unlocked=[b.id for b in unlocked],
        )
        return ValidationOutcome(skill_validated=True, badges_unlocked=unlocked)
