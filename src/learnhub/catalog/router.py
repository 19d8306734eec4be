"""Catalog endpoints: skills, courses, lessons and resources.

Reads need a signed-in user; writes need an administrator.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from learnhub.auth.dependencies import get_current_admin, get_current_user
from learnhub.catalog.schemas import (
    CourseCreate,
    CourseUpdate,
    LessonCreate,
    LessonReorder,
    LessonUpdate,
    ResourceCreate,
    SkillCreate,
    SkillUpdate,
)
from learnhub.catalog.service import CatalogService
from learnhub.dependencies import get_store
from learnhub.entities import Course, Lesson, Quiz, Resource, Skill, User
from learnhub.errors import NotFoundError
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Catalog"])


# ---- Skills ----


@router.get("/skills", response_model=list[Skill])
async def list_skills(
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Skill]:
    return await CatalogService(store).list_skills()


@router.get("/skills/{skill_id}", response_model=Skill)
async def get_skill(
    skill_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Skill:
    return await CatalogService(store).require_skill(skill_id)


@router.get("/skills/{skill_id}/courses", response_model=list[Course])
async def skill_courses(
    skill_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Course]:
    return await CatalogService(store).skill_courses(skill_id)


@router.get("/skills/{skill_id}/quizzes", response_model=list[Quiz])
async def skill_quizzes(
    skill_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Quiz]:
    return await CatalogService(store).skill_quizzes(skill_id)


@router.post("/skills", status_code=201)
async def create_skill(
    body: SkillCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    skill_id = await CatalogService(store).create_skill(body)
    await store.commit()
    return {"id": skill_id}


@router.patch("/skills/{skill_id}", response_model=Skill)
async def update_skill(
    skill_id: str,
    body: SkillUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> Skill:
    svc = CatalogService(store)
    await svc.update_skill(skill_id, body)
    await store.commit()
    return await svc.require_skill(skill_id)


@router.delete("/skills/{skill_id}", status_code=204)
async def delete_skill(
    skill_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await CatalogService(store).delete_skill(skill_id)
    await store.commit()


# ---- Courses ----


@router.get("/courses", response_model=list[Course])
async def list_courses(
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Course]:
    return await CatalogService(store).list_courses()


@router.get("/courses/{course_id}", response_model=Course)
async def get_course(
    course_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Course:
    return await CatalogService(store).require_course(course_id)


@router.post("/courses", status_code=201)
async def create_course(
    body: CourseCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    course_id = await CatalogService(store).create_course(body)
    await store.commit()
    return {"id": course_id}


@router.patch("/courses/{course_id}", response_model=Course)
async def update_course(
    course_id: str,
    body: CourseUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> Course:
    svc = CatalogService(store)
    await svc.update_course(course_id, body)
    await store.commit()
    return await svc.require_course(course_id)


@router.delete("/courses/{course_id}", status_code=204)
async def delete_course(
    course_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await CatalogService(store).delete_course(course_id)
    await store.commit()


# ---- Lessons ----


@router.get("/courses/{course_id}/lessons", response_model=list[Lesson])
async def course_lessons(
    course_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Lesson]:
    """Lessons in ascending order; lessons without an order come last."""
    return await CatalogService(store).course_lessons(course_id)


@router.get("/lessons/{lesson_id}", response_model=Lesson)
async def get_lesson(
    lesson_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Lesson:
    lesson = await CatalogService(store).get_lesson(lesson_id)
    if lesson is None:
        raise NotFoundError("Lesson not found")
    return lesson


@router.post("/lessons", status_code=201)
async def add_lesson(
    body: LessonCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    lesson_id = await CatalogService(store).add_lesson(body)
    await store.commit()
    return {"id": lesson_id}


@router.post("/lessons/reorder")
async def reorder_lessons(
    body: LessonReorder,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await CatalogService(store).reorder_lessons(body.lesson_ids)
    await store.commit()
    return {"reordered": len(body.lesson_ids)}


@router.patch("/lessons/{lesson_id}")
async def update_lesson(
    lesson_id: str,
    body: LessonUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await CatalogService(store).update_lesson(lesson_id, body)
    await store.commit()
    return {"id": lesson_id}


@router.delete("/lessons/{lesson_id}", status_code=204)
async def delete_lesson(
    lesson_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await CatalogService(store).delete_lesson(lesson_id)
    await store.commit()


# ---- Resources ----


@router.get("/courses/{course_id}/resources", response_model=list[Resource])
async def course_resources(
    course_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Resource]:
    return await CatalogService(store).course_resources(course_id)


@router.post("/courses/{course_id}/resources", status_code=201)
async def add_resource(
    course_id: str,
    body: ResourceCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    resource_id = await CatalogService(store).add_resource(course_id, body)
    await store.commit()
    return {"id": resource_id}


@router.delete("/resources/{resource_id}", status_code=204)
async def delete_resource(
    resource_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await CatalogService(store).delete_resource(resource_id)
    await store.commit()
