"""Skill enrollment endpoints for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from learnhub.auth.dependencies import get_current_user
from learnhub.dependencies import get_store
from learnhub.enrollment.schemas import AvailableSkill
from learnhub.enrollment.service import EnrollmentService
from learnhub.entities import User, UserSkillProgress
from learnhub.errors import NotFoundError
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1/enrollment", tags=["Enrollment"])


@router.get("/skills", response_model=list[AvailableSkill])
async def available_skills(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[AvailableSkill]:
    """Catalog skills that have courses, with the user's enrollment where present."""
    items = await EnrollmentService(store).available_skills(user.id)
    return [
        AvailableSkill(skill=i.skill, course_count=i.course_count, progress=i.progress) for i in items
    ]


@router.get("/me", response_model=list[UserSkillProgress])
async def enrolled_skills(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[UserSkillProgress]:
    return await EnrollmentService(store).enrolled_skills(user.id)


@router.post("/skills/{skill_id}", status_code=201)
async def enroll(
    skill_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    record_id = await EnrollmentService(store).enroll(user.id, skill_id)
    await store.commit()
    return {"id": record_id}


@router.delete("/skills/{skill_id}")
async def unenroll(
    skill_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    async with store.transaction():
        removed = await EnrollmentService(store).unenroll(user.id, skill_id)
    return {"progress_removed": removed}


@router.get("/skills/{skill_id}/progress", response_model=UserSkillProgress)
async def skill_progress(
    skill_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> UserSkillProgress:
    """Enrollment with its level re-derived from the user's completed courses."""
    record = await EnrollmentService(store).get_user_skill_progress(user.id, skill_id)
    if record is None:
        raise NotFoundError("Not enrolled in this skill")
    return record
