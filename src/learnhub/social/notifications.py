"""In-app notifications."""

from __future__ import annotations

import logging

from learnhub.entities import NOTIFICATIONS, Notification
from learnhub.errors import NotFoundError, PermissionDeniedError, ValidationError
from learnhub.store import DocumentStore, Repository

logger = logging.getLogger(__name__)

VALID_TYPES = {"achievement", "reminder", "progress", "system"}


class NotificationService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.notifications = Repository(store, NOTIFICATIONS, Notification)

    async def create(
        self,
        user_id: str,
        content: str,
        type: str = "system",  # noqa: A002
        related_id: str | None = None,
    ) -> str:
        if type not in VALID_TYPES:
            msg = f"Invalid notification type: {type}"
            raise ValidationError(msg)
        notification = Notification(
            user_id=user_id,
            content=content,
            type=type,
            read=False,
            related_id=related_id,
        )
        return await self.notifications.create(notification, stamp=("createdAt",))

    async def for_user(self, user_id: str) -> list[Notification]:
        """Newest first; sorted here so no composite index is needed."""
        items = await self.notifications.find(userId=user_id)
        items.sort(key=lambda n: n.created_at.timestamp() if n.created_at else 0.0, reverse=True)
        return items

    async def unread_count(self, user_id: str) -> int:
        return len(await self.notifications.find(userId=user_id, read=False))

    async def mark_read(self, user_id: str, notification_id: str) -> None:
        notification = await self.notifications.get(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise PermissionDeniedError("Not your notification")
        await self.notifications.update(notification_id, {"read": True})

    async def mark_all_read(self, user_id: str) -> int:
        unread = await self.notifications.find(userId=user_id, read=False)
        for notification in unread:
            await self.notifications.update(notification.id, {"read": True})
        return len(unread)
