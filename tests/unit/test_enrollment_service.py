"""Skill enrollment and level derivation."""

import pytest

from learnhub.catalog.schemas import CourseCreate, SkillCreate
from learnhub.catalog.service import CatalogService
from learnhub.enrollment.service import EnrollmentService
from learnhub.entities import SKILLS, Skill
from learnhub.errors import ConflictError, NotFoundError, ValidationError
from learnhub.gamification.validated_skills import ValidatedSkillService
from learnhub.gamification.validation_service import SkillValidationService
from learnhub.progress.service import ProgressService
from learnhub.store import Repository


class TestEnroll:
    @pytest.mark.asyncio
    async def test_enroll_creates_level_zero_record(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)
        record = await svc.find(learner, catalog.skill_id)
        assert record.level == 0
        assert record.total_courses == 2
        assert record.enrolled_at is not None

    @pytest.mark.asyncio
    async def test_enroll_twice_conflicts(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)
        with pytest.raises(ConflictError):
            await svc.enroll(learner, catalog.skill_id)

    @pytest.mark.asyncio
    async def test_enroll_rejections(self, store, learner):
        svc = EnrollmentService(store)
        with pytest.raises(ValidationError):
            await svc.enroll(learner, "")
        with pytest.raises(NotFoundError):
            await svc.enroll(learner, "missing")
        empty_skill = await CatalogService(store).create_skill(SkillCreate(name="Empty"))
        with pytest.raises(ValidationError):
            await svc.enroll(learner, empty_skill)


class TestLevel:
    @pytest.mark.asyncio
    async def test_recompute_after_course_completion(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)
        await ProgressService(store).complete_course(learner, catalog.external_course_id)

        updated = await svc.recompute_for_course(learner, catalog.external_course_id)
        assert updated.level == 50
        assert updated.courses_completed == 1
        stored = await svc.find(learner, catalog.skill_id)
        assert stored.level == 50

    @pytest.mark.asyncio
    async def test_not_enrolled(self, store, learner, catalog):
        svc = EnrollmentService(store)
        assert await svc.get_user_skill_progress(learner, catalog.skill_id) is None
        assert await svc.recompute(learner, catalog.skill_id) is None

    @pytest.mark.asyncio
    async def test_validated_skill_stays_at_100(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)
        await ValidatedSkillService(store).record(learner, catalog.skill_id, "Python", 90, [])
        record = await svc.recompute(learner, catalog.skill_id)
        assert record.level == 100
        assert record.courses_completed == 0


class TestUnenroll:
    @pytest.mark.asyncio
    async def test_removes_course_and_lesson_records_only(self, store, learner, catalog):
        svc = EnrollmentService(store)
        progress = ProgressService(store)
        await svc.enroll(learner, catalog.skill_id)
        await progress.complete_lesson(learner, catalog.lesson_ids[0], catalog.internal_course_id)
        await progress.start_course(learner, catalog.internal_course_id)
        await progress.complete_course(learner, catalog.external_course_id)
        await progress.record_quiz_result(learner, catalog.quiz_id, 100, True)
        await progress.complete_lesson(learner, "foreign-lesson", "foreign-course")

        removed = await svc.unenroll(learner, catalog.skill_id)
        assert removed == 3
        assert await svc.find(learner, catalog.skill_id) is None
        remaining = await progress.progress.find(userId=learner)
        assert {(p.quiz_id, p.lesson_id) for p in remaining} == {
            (catalog.quiz_id, None),
            (None, "foreign-lesson"),
        }

    @pytest.mark.asyncio
    async def test_reenroll_after_validation_starts_at_zero(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)
        await SkillValidationService(store).validate_skill(learner, catalog.skill_id, 90)
        assert (await svc.get_user_skill_progress(learner, catalog.skill_id)).level == 100

        await svc.unenroll(learner, catalog.skill_id)
        await svc.enroll(learner, catalog.skill_id)

        fresh = await svc.get_user_skill_progress(learner, catalog.skill_id)
        assert fresh.level == 0
        assert fresh.courses_completed == 0
        assert (await svc.recompute(learner, catalog.skill_id)).level == 0
        assert await ValidatedSkillService(store).get(learner, catalog.skill_id) is not None

        await SkillValidationService(store).validate_skill(learner, catalog.skill_id, 85)
        assert (await svc.get_user_skill_progress(learner, catalog.skill_id)).level == 100

    @pytest.mark.asyncio
    async def test_unenroll_without_enrollment(self, store, learner, catalog):
        with pytest.raises(NotFoundError):
            await EnrollmentService(store).unenroll(learner, catalog.skill_id)


class TestListings:
    @pytest.mark.asyncio
    async def test_available_skills_need_courses_and_global_owner(self, store, learner, catalog):
        await CatalogService(store).create_skill(SkillCreate(name="No courses"))
        private_id = await Repository(store, SKILLS, Skill).create(Skill(name="Private", user_id=learner))
        await CatalogService(store).create_course(CourseCreate(title="Mine", skill_id=private_id))
        svc = EnrollmentService(store)
        await svc.enroll(learner, catalog.skill_id)

        available = await svc.available_skills(learner)
        assert [(a.skill.id, a.course_count) for a in available] == [(catalog.skill_id, 2)]
        assert available[0].progress is not None
        assert [e.skill_id for e in await svc.enrolled_skills(learner)] == [catalog.skill_id]

    @pytest.mark.asyncio
    async def test_force_level_enrolls_when_needed(self, store, learner, catalog):
        svc = EnrollmentService(store)
        await svc.force_level(learner, catalog.skill_id, 100)
        record = await svc.find(learner, catalog.skill_id)
        assert record.level == 100
        assert record.total_courses == 2
