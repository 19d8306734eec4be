"""Goals, notifications and favorites of the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from learnhub.auth.dependencies import get_current_user
from learnhub.dependencies import get_store
from learnhub.entities import Favorite, Goal, Notification, User
from learnhub.social.favorites import FavoriteService
from learnhub.social.goals import GoalService
from learnhub.social.notifications import NotificationService
from learnhub.social.schemas import FavoriteRequest, FavoriteStatus, GoalCreate, GoalUpdate
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Social"])


# ---- Goals ----


@router.get("/goals", response_model=list[Goal])
async def list_goals(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Goal]:
    return await GoalService(store).for_user(user.id)


@router.post("/goals", status_code=201)
async def add_goal(
    body: GoalCreate,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    goal_id = await GoalService(store).add(user.id, body)
    await store.commit()
    return {"id": goal_id}


@router.patch("/goals/{goal_id}")
async def update_goal(
    goal_id: str,
    body: GoalUpdate,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await GoalService(store).update(user.id, goal_id, body)
    await store.commit()
    return {"id": goal_id}


@router.post("/goals/{goal_id}/complete")
async def complete_goal(
    goal_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await GoalService(store).complete(user.id, goal_id)
    await store.commit()
    return {"id": goal_id, "completed": True}


@router.delete("/goals/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> None:
    await GoalService(store).delete(user.id, goal_id)
    await store.commit()


# ---- Notifications ----


@router.get("/notifications", response_model=list[Notification])
async def list_notifications(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Notification]:
    """Newest first."""
    return await NotificationService(store).for_user(user.id)


@router.get("/notifications/unread-count")
async def unread_count(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    return {"count": await NotificationService(store).unread_count(user.id)}


@router.post("/notifications/read-all")
async def mark_all_read(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    updated = await NotificationService(store).mark_all_read(user.id)
    await store.commit()
    return {"updated": updated}


@router.post("/notifications/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await NotificationService(store).mark_read(user.id, notification_id)
    await store.commit()
    return {"id": notification_id, "read": True}


# ---- Favorites ----


@router.get("/favorites", response_model=list[Favorite])
async def list_favorites(
    item_type: str | None = Query(None, alias="itemType"),
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Favorite]:
    return await FavoriteService(store).for_user(user.id, item_type)


@router.post("/favorites", status_code=201)
async def add_favorite(
    body: FavoriteRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    favorite_id = await FavoriteService(store).add(user.id, body.item_type, body.item_id)
    await store.commit()
    return {"id": favorite_id}


@router.delete("/favorites/{item_type}/{item_id}")
async def remove_favorite(
    item_type: str,
    item_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    removed = await FavoriteService(store).remove(user.id, item_type, item_id)
    await store.commit()
    return {"removed": removed}


@router.get("/favorites/{item_type}/{item_id}", response_model=FavoriteStatus)
async def favorite_status(
    item_type: str,
    item_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> FavoriteStatus:
    return FavoriteStatus(is_favorite=await FavoriteService(store).is_favorite(user.id, item_type, item_id))
