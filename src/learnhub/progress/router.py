"""Progress endpoints: starting and completing lessons and courses."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from learnhub.auth.dependencies import get_current_user
from learnhub.dependencies import get_store
from learnhub.enrollment.service import EnrollmentService
from learnhub.entities import Progress, User
from learnhub.errors import NotFoundError
from learnhub.progress.schemas import CompletionEventResponse, CourseCompletionResponse
from learnhub.progress.service import ProgressService
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1/progress", tags=["Progress"])


@router.get("/me", response_model=list[Progress])
async def my_progress(
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Progress]:
    """Every record of the user, most recently accessed first."""
    return await ProgressService(store).get_user_progress(user.id)


@router.get("/me/history", response_model=list[Progress])
async def my_history(
    limit: int | None = Query(None, ge=1, le=500),
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Progress]:
    return await ProgressService(store).get_user_history(user.id, limit=limit)


# ---- Courses ----


@router.get("/courses/{course_id}", response_model=CourseCompletionResponse)
async def course_progress(
    course_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> CourseCompletionResponse:
    svc = ProgressService(store)
    completion = await svc.course_completion(user.id, course_id)
    return CourseCompletionResponse(
        **asdict(completion),
        progress=await svc.get_course_progress(user.id, course_id),
    )


@router.post("/courses/{course_id}/start")
async def start_course(
    course_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    progress_id = await ProgressService(store).start_course(user.id, course_id)
    await store.commit()
    return {"progress_id": progress_id}


@router.post("/courses/{course_id}/complete", response_model=CompletionEventResponse)
async def complete_course(
    course_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> CompletionEventResponse:
    """Confirm completion, then re-derive the skill level, in one transaction."""
    async with store.transaction():
        progress_id = await ProgressService(store).complete_course(user.id, course_id)
        skill_progress = await EnrollmentService(store).recompute_for_course(user.id, course_id)
    return CompletionEventResponse(progress_id=progress_id, skill_progress=skill_progress)


# ---- Lessons ----


@router.get("/lessons/{lesson_id}", response_model=Progress)
async def lesson_progress(
    lesson_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Progress:
    record = await ProgressService(store).get_lesson_progress(user.id, lesson_id)
    if record is None:
        raise NotFoundError("No progress for this lesson")
    return record


async def _lesson_course(store: DocumentStore, lesson_id: str) -> str:
    lesson = await ProgressService(store).lessons.get(lesson_id)
    if lesson is None:
        raise NotFoundError("Lesson not found")
    return lesson.course_id


@router.post("/lessons/{lesson_id}/start")
async def start_lesson(
    lesson_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> dict:
    course_id = await _lesson_course(store, lesson_id)
    progress_id = await ProgressService(store).start_lesson(user.id, lesson_id, course_id)
    await store.commit()
    return {"progress_id": progress_id}


@router.post("/lessons/{lesson_id}/complete", response_model=CourseCompletionResponse)
async def complete_lesson(
    lesson_id: str,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> CourseCompletionResponse:
    """Complete a lesson and return the updated course completion."""
    course_id = await _lesson_course(store, lesson_id)
    svc = ProgressService(store)
    async with store.transaction():
        await svc.complete_lesson(user.id, lesson_id, course_id)
        completion = await svc.course_completion(user.id, course_id)
    return CourseCompletionResponse(
        **asdict(completion),
        progress=await svc.get_course_progress(user.id, course_id),
    )
