"""Badge and validated-skill endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from learnhub.auth.dependencies import get_current_admin, get_current_user
from learnhub.dependencies import get_store
from learnhub.entities import Badge, User, ValidatedSkill
from learnhub.gamification.badge_service import BadgeService
from learnhub.gamification.schemas import BadgeCreate, BadgeUpdate, UserBadgesResponse
from learnhub.gamification.validated_skills import ValidatedSkillService
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Badges ──


@router.get("/badges", response_model=list[Badge])
async def list_badges(
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Badge]:
    """Catalog badges (no per-user claims)."""
    return await BadgeService(store).list_catalog()


@router.get("/badges/me", response_model=UserBadgesResponse)
async def my_badges(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> UserBadgesResponse:
    svc = BadgeService(store)
    unlocked = await svc.user_badges(user.id)
    return UserBadgesResponse(
        badges=unlocked,
        total_available=len(await svc.list_catalog()),
        total_unlocked=len(unlocked),
    )


@router.get("/badges/{badge_id}", response_model=Badge)
async def get_badge(
    badge_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Badge:
    return await BadgeService(store).require(badge_id)


@router.post("/badges", status_code=201)
async def create_badge(
    body: BadgeCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    badge_id = await BadgeService(store).create(body)
    await store.commit()
    return {"id": badge_id}


@router.patch("/badges/{badge_id}", response_model=Badge)
async def update_badge(
    badge_id: str,
    body: BadgeUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> Badge:
    svc = BadgeService(store)
    await svc.update(badge_id, body)
    await store.commit()
    return await svc.require(badge_id)


@router.delete("/badges/{badge_id}", status_code=204)
async def delete_badge(
    badge_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await BadgeService(store).delete(badge_id)
    await store.commit()


# ── Validated skills ──


@router.get("/validated-skills/me", response_model=list[ValidatedSkill])
async def my_validated_skills(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[ValidatedSkill]:
    return await ValidatedSkillService(store).for_user(user.id)


@router.get("/validated-skills", response_model=list[ValidatedSkill])
async def all_validated_skills(
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ValidatedSkill]:
    return await ValidatedSkillService(store).all()


@router.get("/skills/{skill_id}/validations", response_model=list[ValidatedSkill])
async def skill_validations(
    skill_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ValidatedSkill]:
    return await ValidatedSkillService(store).for_skill(skill_id)
