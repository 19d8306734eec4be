"""Integration: catalog setup by an admin, then a learner's path through it."""

from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import AsyncClient


async def _post_id(client: AsyncClient, url: str, body: dict, headers: dict) -> str:
    response = await client.post(url, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


@pytest_asyncio.fixture
async def course_setup(client: AsyncClient, admin) -> SimpleNamespace:
    h = admin.headers
    skill_id = await _post_id(client, "/api/v1/skills", {"name": "Git", "description": "Version control"}, h)
    course_id = await _post_id(client, "/api/v1/courses", {"title": "Git basics", "skillId": skill_id}, h)
    lesson_ids = [
        await _post_id(
            client,
            "/api/v1/lessons",
            {"title": title, "courseId": course_id, "order": order, "contentType": "text"},
            h,
        )
        for order, title in ((1, "Commits"), (2, "Branches"))
    ]
    quiz_id = await _post_id(client, "/api/v1/quizzes", {"title": "Git quiz", "skillId": skill_id}, h)
    question_ids = [
        await _post_id(
            client,
            f"/api/v1/quizzes/{quiz_id}/questions",
            {"content": content, "correctAnswer": answer, "type": "text"},
            h,
        )
        for content, answer in (("Save a snapshot?", "commit"), ("Parallel line of work?", "branch"))
    ]
    badge_id = await _post_id(
        client,
        "/api/v1/badges",
        {"title": "Git master", "skillId": skill_id, "conditions": {"type": "quiz_score", "value": 80}},
        h,
    )
    return SimpleNamespace(
        skill_id=skill_id,
        course_id=course_id,
        lesson_ids=lesson_ids,
        quiz_id=quiz_id,
        question_ids=question_ids,
        badge_id=badge_id,
    )


class TestCatalogPermissions:
    @pytest.mark.asyncio
    async def test_learner_cannot_write(self, client: AsyncClient, user):
        response = await client.post("/api/v1/skills", json={"name": "Hacking"}, headers=user.headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_name_is_rejected(self, client: AsyncClient, admin):
        response = await client.post("/api/v1/skills", json={"name": ""}, headers=admin.headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_lessons_listed_in_order(self, client: AsyncClient, user, course_setup):
        response = await client.get(f"/api/v1/courses/{course_setup.course_id}/lessons", headers=user.headers)
        assert [lesson["title"] for lesson in response.json()] == ["Commits", "Branches"]


class TestLearnerPath:
    @pytest.mark.asyncio
    async def test_enroll_complete_course_and_level(self, client: AsyncClient, user, course_setup):
        h = user.headers
        enrolled = await client.post(f"/api/v1/enrollment/skills/{course_setup.skill_id}", headers=h)
        assert enrolled.status_code == 201
        again = await client.post(f"/api/v1/enrollment/skills/{course_setup.skill_id}", headers=h)
        assert again.status_code == 409

        first = await client.post(f"/api/v1/progress/lessons/{course_setup.lesson_ids[0]}/complete", headers=h)
        assert first.status_code == 200
        assert first.json()["percentage"] == 50

        early = await client.post(f"/api/v1/progress/courses/{course_setup.course_id}/complete", headers=h)
        assert early.status_code == 400

        await client.post(f"/api/v1/progress/lessons/{course_setup.lesson_ids[1]}/complete", headers=h)
        done = await client.post(f"/api/v1/progress/courses/{course_setup.course_id}/complete", headers=h)
        assert done.status_code == 200
        assert done.json()["skillProgress"]["level"] == 100

        level = await client.get(f"/api/v1/enrollment/skills/{course_setup.skill_id}/progress", headers=h)
        assert level.json()["coursesCompleted"] == 1

        history = await client.get("/api/v1/progress/me/history", headers=h)
        assert len(history.json()) == 3

    @pytest.mark.asyncio
    async def test_unenroll_clears_course_progress(self, client: AsyncClient, user, course_setup):
        h = user.headers
        await client.post(f"/api/v1/enrollment/skills/{course_setup.skill_id}", headers=h)
        await client.post(f"/api/v1/progress/lessons/{course_setup.lesson_ids[0]}/complete", headers=h)

        response = await client.delete(f"/api/v1/enrollment/skills/{course_setup.skill_id}", headers=h)
        assert response.status_code == 200
        assert response.json() == {"progress_removed": 1}
        assert (await client.get("/api/v1/progress/me", headers=h)).json() == []
        assert (await client.get("/api/v1/enrollment/me", headers=h)).json() == []


class TestQuizFlow:
    @pytest.mark.asyncio
    async def test_learner_view_hides_answers(self, client: AsyncClient, user, course_setup):
        response = await client.get(f"/api/v1/quizzes/{course_setup.quiz_id}", headers=user.headers)
        assert response.status_code == 200
        questions = response.json()["questions"]
        assert len(questions) == 2
        assert all("correctAnswer" not in q for q in questions)

        admin_only = await client.get(f"/api/v1/quizzes/{course_setup.quiz_id}/questions", headers=user.headers)
        assert admin_only.status_code == 403

    @pytest.mark.asyncio
    async def test_passing_quiz_validates_skill_and_unlocks_badge(self, client: AsyncClient, user, admin, course_setup):
        h = user.headers
        answers = dict(zip(course_setup.question_ids, ("Commit", " branch ")))
        response = await client.post(f"/api/v1/quizzes/{course_setup.quiz_id}/submit", json={"answers": answers}, headers=h)
        assert response.status_code == 200
        result = response.json()
        assert result["percentage"] == 100
        assert result["passed"] is True
        assert result["skillValidated"] is True
        assert [b["id"] for b in result["badgesUnlocked"]] == [course_setup.badge_id]

        badges = (await client.get("/api/v1/badges/me", headers=h)).json()
        assert badges["totalUnlocked"] == 1
        assert badges["totalAvailable"] == 1

        validated = (await client.get("/api/v1/validated-skills/me", headers=h)).json()
        assert [(v["skillId"], v["quizScore"]) for v in validated] == [(course_setup.skill_id, 100)]

        level = await client.get(f"/api/v1/enrollment/skills/{course_setup.skill_id}/progress", headers=h)
        assert level.json()["level"] == 100

        notifications = (await client.get("/api/v1/notifications", headers=h)).json()
        assert [n["type"] for n in notifications] == ["achievement"]

        results = await client.get(f"/api/v1/quizzes/{course_setup.quiz_id}/results", headers=admin.headers)
        assert [r["userName"] for r in results.json()] == ["Alan User"]

    @pytest.mark.asyncio
    async def test_failing_quiz(self, client: AsyncClient, user, course_setup):
        answers = {course_setup.question_ids[0]: "commit"}
        response = await client.post(
            f"/api/v1/quizzes/{course_setup.quiz_id}/submit", json={"answers": answers}, headers=user.headers
        )
        result = response.json()
        assert result["percentage"] == 50
        assert result["passed"] is False
        assert result["unanswered"] == 1
        assert result["badgesUnlocked"] == []


class TestSocialAndAdmin:
    @pytest.mark.asyncio
    async def test_goals_and_favorites(self, client: AsyncClient, user, course_setup):
        h = user.headers
        goal_id = await _post_id(client, "/api/v1/goals", {"target": "Learn Git"}, h)
        assert (await client.post(f"/api/v1/goals/{goal_id}/complete", headers=h)).status_code == 200
        assert (await client.get("/api/v1/goals", headers=h)).json()[0]["completed"] is True

        body = {"itemType": "course", "itemId": course_setup.course_id}
        first = await _post_id(client, "/api/v1/favorites", body, h)
        assert await _post_id(client, "/api/v1/favorites", body, h) == first
        status = await client.get(f"/api/v1/favorites/course/{course_setup.course_id}", headers=h)
        assert status.json() == {"isFavorite": True}

    @pytest.mark.asyncio
    async def test_admin_stats(self, client: AsyncClient, admin, user, course_setup):
        await client.post(f"/api/v1/progress/lessons/{course_setup.lesson_ids[0]}/complete", headers=user.headers)
        stats = await client.get("/api/v1/admin/stats", headers=admin.headers)
        assert stats.status_code == 200
        data = stats.json()
        assert data["totalUsers"] == 2
        assert data["totalBadges"] == 1
        assert sum(d["count"] for d in data["completionsByDate"]) == 1

        by_user = await client.get(f"/api/v1/admin/progress/users/{user.id}", headers=admin.headers)
        assert [e["userName"] for e in by_user.json()] == ["Alan User"]
        assert (await client.get("/api/v1/admin/stats", headers=user.headers)).status_code == 403
