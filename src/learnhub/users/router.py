"""User profile endpoints and admin user management."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from learnhub.auth.dependencies import get_current_admin, get_current_user
from learnhub.dependencies import get_store
from learnhub.entities import User
from learnhub.errors import ValidationError
from learnhub.store import DocumentStore
from learnhub.users.schemas import ProfileUpdateRequest, RoleUpdateRequest
from learnhub.users.service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=User)
async def get_profile(user: User = Depends(get_current_user)) -> User:
    return user


@router.patch("/me", response_model=User)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> User:
    updated = await UserService(store).update_profile(user.id, body)
    await store.commit()
    return updated


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------


@router.get("", response_model=list[User])
async def list_users(
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[User]:
    return await UserService(store).list_users()


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> User:
    return await UserService(store).require(user_id)


@router.patch("/{user_id}/role")
async def set_role(
    user_id: str,
    body: RoleUpdateRequest,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await UserService(store).set_role(user_id, body.role)
    await store.commit()
    return {"id": user_id, "role": body.role}


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    if user_id == admin.id:
        raise ValidationError("Administrators cannot delete their own account")
    await UserService(store).delete_user(user_id)
    await store.commit()
