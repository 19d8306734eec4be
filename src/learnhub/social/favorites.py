"""Favorite courses, skills and resources."""

from __future__ import annotations

from learnhub.entities import FAVORITES, Favorite
from learnhub.store import DocumentStore, Repository


class FavoriteService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.favorites = Repository(store, FAVORITES, Favorite)

    async def find(self, user_id: str, item_type: str, item_id: str) -> Favorite | None:
        return await self.favorites.find_one(userId=user_id, itemType=item_type, itemId=item_id)

    async def add(self, user_id: str, item_type: str, item_id: str) -> str:
        """Add a favorite; adding the same item twice returns the existing id."""
        existing = await self.find(user_id, item_type, item_id)
        if existing is not None:
            return existing.id
        favorite = Favorite(user_id=user_id, item_type=item_type, item_id=item_id)
        return await self.favorites.create(favorite, stamp=("createdAt",))

    async def remove(self, user_id: str, item_type: str, item_id: str) -> bool:
        existing = await self.find(user_id, item_type, item_id)
        if existing is None:
            return False
        await self.favorites.delete(existing.id)
        return True

    async def for_user(self, user_id: str, item_type: str | None = None) -> list[Favorite]:
        if item_type:
            return await self.favorites.find(userId=user_id, itemType=item_type)
        return await self.favorites.find(userId=user_id)

    async def is_favorite(self, user_id: str, item_type: str, item_id: str) -> bool:
        return await self.find(user_id, item_type, item_id) is not None
