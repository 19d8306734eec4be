"""User profiles and their administration."""

from __future__ import annotations

import logging

from learnhub.entities import USERS, User
from learnhub.errors import NotFoundError, ValidationError
from learnhub.store import SERVER_TIMESTAMP, DocumentStore, Repository
from learnhub.store.codec import build_patch
from learnhub.users.schemas import ProfileUpdateRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.users = Repository(store, USERS, User)

    async def create_profile(self, name: str, email: str, role: str = "user") -> str:
        """New profile with empty skill, goal and badge lists."""
        user = User(name=name, email=email, role=role, skills=[], goals=[], badges=[])
        return await self.users.create(user, stamp=("createdAt", "updatedAt"))

    async def get_profile(self, user_id: str) -> User | None:
        return await self.users.get(user_id)

    async def require(self, user_id: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def find_by_email(self, email: str) -> User | None:
        return await self.users.find_one(email=email.lower().strip())

    async def update_profile(self, user_id: str, data: ProfileUpdateRequest) -> User:
        await self.require(user_id)
        patch = build_patch(data)
        if "name" in patch and not (patch["name"] or "").strip():
            raise ValidationError("Name is required")
        patch["updatedAt"] = SERVER_TIMESTAMP
        await self.users.update(user_id, patch)
        return await self.require(user_id)

    # --- Administration ---

    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def set_role(self, user_id: str, role: str) -> None:
        if role not in ("user", "admin"):
            msg = f"Invalid role: {role}"
            raise ValidationError(msg)
        await self.require(user_id)
        await self.users.update(user_id, {"role": role, "updatedAt": SERVER_TIMESTAMP})
        logger.info("Role of %s set to %s", user_id, role)

    async def upsert_admin(self, user_id: str, name: str, email: str) -> None:
        """Create or merge the profile of ``user_id`` with the admin role."""
        existing = await self.users.get(user_id)
        if existing is None:
            user = User(name=name, email=email, role="admin", skills=[], goals=[], badges=[])
            await self.users.put(user_id, user, stamp=("createdAt", "updatedAt"))
        else:
            await self.users.update(
                user_id, {"name": name, "email": email, "role": "admin", "updatedAt": SERVER_TIMESTAMP}
            )

    async def delete_user(self, user_id: str) -> None:
        await self.users.delete(user_id)
