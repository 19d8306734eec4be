"""Catalog administration."""

import pytest

from learnhub.catalog.schemas import (
    CourseCreate,
    CourseUpdate,
    LessonCreate,
    ResourceCreate,
    SkillCreate,
    SkillUpdate,
)
from learnhub.catalog.service import CatalogService
from learnhub.errors import NotFoundError, ValidationError


class TestSkills:
    @pytest.mark.asyncio
    async def test_create_and_update(self, store):
        svc = CatalogService(store)
        skill_id = await svc.create_skill(SkillCreate(name="  SQL ", description="Queries"))
        skill = await svc.require_skill(skill_id)
        assert skill.name == "SQL"
        assert skill.is_global

        await svc.update_skill(skill_id, SkillUpdate(description="Joins"))
        updated = await svc.require_skill(skill_id)
        assert updated.name == "SQL"
        assert updated.description == "Joins"
        assert updated.updated_at >= skill.updated_at

    @pytest.mark.asyncio
    async def test_name_required(self, store):
        svc = CatalogService(store)
        with pytest.raises(ValidationError):
            await svc.create_skill(SkillCreate(name=" "))

    @pytest.mark.asyncio
    async def test_skill_children(self, store, catalog):
        svc = CatalogService(store)
        assert len(await svc.skill_courses(catalog.skill_id)) == 2
        assert [q.id for q in await svc.skill_quizzes(catalog.skill_id)] == [catalog.quiz_id]


class TestCourses:
    @pytest.mark.asyncio
    async def test_validation(self, store, catalog):
        svc = CatalogService(store)
        with pytest.raises(ValidationError):
            await svc.create_course(CourseCreate(title="", skill_id=catalog.skill_id))
        with pytest.raises(ValidationError):
            await svc.create_course(CourseCreate(title="No skill"))
        with pytest.raises(ValidationError):
            await svc.create_course(CourseCreate(title="Ext", skill_id=catalog.skill_id, type="external"))
        with pytest.raises(NotFoundError):
            await svc.create_course(CourseCreate(title="Orphan", skill_id="missing"))

    @pytest.mark.asyncio
    async def test_clearing_external_url(self, store, catalog):
        svc = CatalogService(store)
        await svc.update_course(catalog.external_course_id, CourseUpdate(external_url="  "))
        course = await svc.require_course(catalog.external_course_id)
        assert course.external_url is None


class TestLessons:
    @pytest.mark.asyncio
    async def test_required_fields(self, store, catalog):
        svc = CatalogService(store)
        with pytest.raises(ValidationError):
            await svc.add_lesson(LessonCreate(title="No order", course_id=catalog.internal_course_id, content_type="text"))
        with pytest.raises(ValidationError):
            await svc.add_lesson(LessonCreate(title="No type", course_id=catalog.internal_course_id, order=3))

    @pytest.mark.asyncio
    async def test_lessons_tracked_on_course(self, store, catalog):
        svc = CatalogService(store)
        course = await svc.require_course(catalog.internal_course_id)
        assert course.lessons == catalog.lesson_ids

        await svc.delete_lesson(catalog.lesson_ids[0])
        course = await svc.require_course(catalog.internal_course_id)
        assert course.lessons == catalog.lesson_ids[1:]
        assert await svc.get_lesson(catalog.lesson_ids[0]) is None

    @pytest.mark.asyncio
    async def test_reorder(self, store, catalog):
        svc = CatalogService(store)
        await svc.reorder_lessons(list(reversed(catalog.lesson_ids)))
        lessons = await svc.course_lessons(catalog.internal_course_id)
        assert [lesson.id for lesson in lessons] == list(reversed(catalog.lesson_ids))


class TestResources:
    @pytest.mark.asyncio
    async def test_add_list_delete(self, store, catalog):
        svc = CatalogService(store)
        resource_id = await svc.add_resource(
            catalog.internal_course_id,
            ResourceCreate(type="article", url="https://example.com/py", title="Cheatsheet"),
        )
        assert [r.id for r in await svc.course_resources(catalog.internal_course_id)] == [resource_id]
        assert (await svc.require_course(catalog.internal_course_id)).resources == [resource_id]

        await svc.delete_resource(resource_id)
        assert await svc.course_resources(catalog.internal_course_id) == []
        assert (await svc.require_course(catalog.internal_course_id)).resources == []

    @pytest.mark.asyncio
    async def test_url_required(self, store, catalog):
        with pytest.raises(ValidationError):
            await CatalogService(store).add_resource(catalog.internal_course_id, ResourceCreate(title="No URL"))
