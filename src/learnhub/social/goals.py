"""Personal learning goals."""

from __future__ import annotations

from learnhub.entities import GOALS, USERS, Goal, User
from learnhub.errors import NotFoundError, PermissionDeniedError, ValidationError
from learnhub.social.schemas import GoalCreate, GoalUpdate
from learnhub.store import DocumentStore, Repository
from learnhub.store.codec import build_patch


class GoalService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.goals = Repository(store, GOALS, Goal)
        self.users = Repository(store, USERS, User)

    async def _owned(self, user_id: str, goal_id: str) -> Goal:
        goal = await self.goals.get(goal_id)
        if goal is None:
            raise NotFoundError("Goal not found")
        if goal.user_id != user_id:
            raise PermissionDeniedError("Not your goal")
        return goal

    async def add(self, user_id: str, data: GoalCreate) -> str:
        if not data.target.strip():
            raise ValidationError("Goal target is required")
        goal = Goal(
            user_id=user_id,
            target=data.target.strip(),
            description=data.description,
            target_date=data.target_date,
            skill_id=data.skill_id or None,
            completed=False,
        )
        goal_id = await self.goals.create(goal, stamp=("createdAt",))
        user = await self.users.get(user_id)
        if user is not None:
            await self.users.update(user_id, {"goals": [*user.goals, goal_id]})
        return goal_id

    async def for_user(self, user_id: str) -> list[Goal]:
        return await self.goals.find(userId=user_id)

    async def update(self, user_id: str, goal_id: str, data: GoalUpdate) -> None:
        await self._owned(user_id, goal_id)
        patch = build_patch(data)
        if "target" in patch and not (patch["target"] or "").strip():
            raise ValidationError("Goal target is required")
        await self.goals.update(goal_id, patch)

    async def complete(self, user_id: str, goal_id: str) -> None:
        await self._owned(user_id, goal_id)
        await self.goals.update(goal_id, {"completed": True})

    async def delete(self, user_id: str, goal_id: str) -> None:
        await self._owned(user_id, goal_id)
        await self.goals.delete(goal_id)
        user = await self.users.get(user_id)
        if user is not None and goal_id in user.goals:
            await self.users.update(user_id, {"goals": [g for g in user.goals if g != goal_id]})
