"""Per-user record of validated skills."""

from __future__ import annotations

from learnhub.entities import VALIDATED_SKILLS, ValidatedSkill
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Repository


def validated_skill_id(user_id: str, skill_id: str) -> str:
    return f"{user_id}_{skill_id}"


class ValidatedSkillService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.validated = Repository(store, VALIDATED_SKILLS, ValidatedSkill)

    async def get(self, user_id: str, skill_id: str) -> ValidatedSkill | None:
        return await self.validated.get(validated_skill_id(user_id, skill_id))

    async def record(
        self,
        user_id: str,
        skill_id: str,
        skill_name: str,
        quiz_score: int,
        badge_ids: list[str],
    ) -> ValidatedSkill:
        """Create or merge the (user, skill) record.

        The timestamp moves to now, the score never decreases and badge ids
        accumulate without duplicates.
        """
        previous = await self.get(user_id, skill_id)
        badges = list(dict.fromkeys([*(previous.badges_unlocked if previous else []), *badge_ids]))
        score = max(previous.quiz_score, quiz_score) if previous else quiz_score
        record = ValidatedSkill(
            user_id=user_id,
            skill_id=skill_id,
            skill_name=skill_name,
            quiz_score=score,
            badges_unlocked=badges,
        )
        await self.validated.put(
            validated_skill_id(user_id, skill_id), record, merge=True, stamp=("validatedAt",)
        )
        return record

    async def for_user(self, user_id: str) -> list[ValidatedSkill]:
        """Newest validation first."""
        return await self.validated.find_ordered("validatedAt", descending=True, userId=user_id)

    async def all(self) -> list[ValidatedSkill]:
        return await self.validated.find_ordered("validatedAt", descending=True)

    async def for_skill(self, skill_id: str) -> list[ValidatedSkill]:
        return await self.validated.find(skillId=skill_id)
