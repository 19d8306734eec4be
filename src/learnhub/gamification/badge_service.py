"""Badge catalog and per-user unlocks with duplicate prevention and notification."""

from __future__ import annotations

import json
import logging

from learnhub.entities import BADGES, USERS, Badge, User
from learnhub.errors import NotFoundError, ValidationError
from learnhub.gamification.conditions import references_skill
from learnhub.gamification.schemas import BadgeCreate, BadgeUpdate
from learnhub.social.notifications import NotificationService
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Filter, Repository
from learnhub.store.codec import build_payload, build_patch

logger = logging.getLogger(__name__)


def claim_id(badge_id: str, user_id: str) -> str:
    """Deterministic id of a user's claim on a catalog badge."""
    return f"{badge_id}:{user_id}"


class BadgeService:
    """Catalog badges have no ``userId``; claim records copy one for a user."""

    def __init__(self, store: DocumentStore, redis: object = None) -> None:
        self.store = store
        self.redis = redis
        self.badges = Repository(store, BADGES, Badge)
        self.users = Repository(store, USERS, User)
        self.notifications = NotificationService(store)

    # --- Catalog ---

    async def list_catalog(self) -> list[Badge]:
        return await self.badges.find_where(Filter("userId", None))

    async def get(self, badge_id: str) -> Badge | None:
        return await self.badges.get(badge_id)

    async def require(self, badge_id: str) -> Badge:
        badge = await self.badges.get(badge_id)
        if badge is None or badge.user_id:
            raise NotFoundError("Badge not found")
        return badge

    async def create(self, data: BadgeCreate) -> str:
        if not data.title.strip():
            raise ValidationError("Badge title is required")
        badge = Badge(
            title=data.title.strip(),
            description=data.description,
            icon=data.icon,
            color=data.color,
            image=data.image,
            skill_id=data.skill_id or None,
            conditions=data.conditions,
        )
        return await self.badges.create(badge)

    async def update(self, badge_id: str, data: BadgeUpdate) -> None:
        await self.require(badge_id)
        patch = build_patch(data)
        if "title" in patch and not (patch["title"] or "").strip():
            raise ValidationError("Badge title is required")
        await self.badges.update(badge_id, patch)

    async def delete(self, badge_id: str) -> None:
        await self.badges.delete(badge_id)

    async def skill_badges(self, skill_id: str) -> list[Badge]:
        """Catalog badges tied to a skill directly or through their condition."""
        return [
            b
            for b in await self.list_catalog()
            if b.skill_id == skill_id or references_skill(b.conditions, skill_id)
        ]

    # --- Per user ---

    async def user_badges(self, user_id: str) -> list[Badge]:
        return await self.badges.find(userId=user_id)

    async def has_badge(self, user_id: str, badge_id: str) -> bool:
        if await self.badges.get(claim_id(badge_id, user_id)) is not None:
            return True
        user = await self.users.get(user_id)
        return user is not None and badge_id in user.badges

    async def held_badge_ids(self, user_id: str) -> set[str]:
        held = {b.catalog_id for b in await self.user_badges(user_id) if b.catalog_id}
        user = await self.users.get(user_id)
        if user is not None:
            held.update(user.badges)
        return held

    async def unlock(self, user_id: str, badge: Badge) -> bool:
        """Unlock a catalog badge for a user.

        Returns False when the user already holds it.
        """
        if await self.has_badge(user_id, badge.id):
            return False

        claim = badge.model_copy(update={"id": None, "template_id": badge.id, "user_id": user_id})
        payload = build_payload(claim)
        payload["unlockedAt"] = SERVER_TIMESTAMP
        await self.store.set(BADGES, claim_id(badge.id, user_id), payload)

        user = await self.users.get(user_id)
        if user is not None:
            await self.users.update(user_id, {"badges": [*user.badges, badge.id]})
        else:
            logger.warning("Badge unlocked for unknown user %s", user_id)

        await self.notifications.create(
            user_id,
            f'Badge unlocked: "{badge.title}"',
            type="achievement",
            related_id=badge.id,
        )
        logger.info("badge_unlocked user=%s badge=%s", user_id, badge.id)
        await self._publish(user_id, badge)
        return True

    async def _publish(self, user_id: str, badge: Badge) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.publish(  # type: ignore[attr-defined]
                "pubsub:badge_unlocked",
                json.dumps({"user_id": user_id, "badge_id": badge.id, "title": badge.title}),
            )
        except Exception:
            logger.warning("Failed to publish badge_unlocked event", exc_info=True)
