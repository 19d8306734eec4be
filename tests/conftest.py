"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.auth.jwt import create_access_token
from learnhub.catalog.schemas import CourseCreate, LessonCreate, SkillCreate
from learnhub.catalog.service import CatalogService
from learnhub.config import get_settings
from learnhub.database import close_db, get_engine, init_db
from learnhub.dependencies import declared_indexes, get_memory_store, reset_memory_store
from learnhub.entities import BADGES, Badge, QuizScoreCondition
from learnhub.main import create_app
from learnhub.quiz.schemas import QuestionCreate, QuizCreate
from learnhub.quiz.service import QuizService
from learnhub.store import MemoryDocumentStore, Repository, SqlDocumentStore
from learnhub.users.service import UserService


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    """In-memory store, no Redis, console logs."""
    monkeypatch.setenv("LEARNHUB_STORE_BACKEND", "memory")
    monkeypatch.setenv("LEARNHUB_REDIS_URL", "")
    monkeypatch.setenv("LEARNHUB_LOG_FORMAT", "console")
    get_settings.cache_clear()
    reset_memory_store()
    yield
    get_settings.cache_clear()
    reset_memory_store()


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore(declared_indexes())


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlDocumentStore, None]:
    """SQL store over an in-memory SQLite database."""
    await init_db("sqlite+aiosqlite://", create_schema=True)
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield SqlDocumentStore(session, "test-project", declared_indexes())
    await close_db()


@pytest_asyncio.fixture
async def learner(store: MemoryDocumentStore) -> str:
    user_id = await UserService(store).create_profile("Ada Learner", "ada@example.com")
    await store.commit()
    return user_id


@pytest_asyncio.fixture
async def catalog(store: MemoryDocumentStore) -> SimpleNamespace:
    """One skill with an internal course (two lessons), an external course,
    a three-question quiz worth 1, 1 and 2 points, and a quiz_score badge."""
    svc = CatalogService(store)
    skill_id = await svc.create_skill(SkillCreate(name="Python", description="Learn Python"))
    internal_id = await svc.create_course(CourseCreate(title="Basics", skill_id=skill_id))
    external_id = await svc.create_course(
        CourseCreate(title="Docs tour", skill_id=skill_id, type="external", external_url="https://docs.python.org")
    )
    lesson_ids = [
        await svc.add_lesson(LessonCreate(title=title, course_id=internal_id, order=order, content_type="text"))
        for order, title in ((1, "Variables"), (2, "Functions"))
    ]

    quizzes = QuizService(store)
    quiz_id = await quizzes.create_quiz(QuizCreate(title="Python check", skill_id=skill_id))
    question_ids = [
        await quizzes.add_question(quiz_id, QuestionCreate(content=content, correct_answer=answer, points=points))
        for content, answer, points in (
            ("Keyword for functions?", "def", 1),
            ("Is Python typed dynamically?", "true", 1),
            ("Immutable sequence type?", "tuple", 2),
        )
    ]

    badge_id = await Repository(store, BADGES, Badge).create(
        Badge(title="Pythonista", skill_id=skill_id, conditions=QuizScoreCondition(value=80))
    )
    await store.commit()
    return SimpleNamespace(
        skill_id=skill_id,
        internal_course_id=internal_id,
        external_course_id=external_id,
        lesson_ids=lesson_ids,
        quiz_id=quiz_id,
        question_ids=question_ids,
        badge_id=badge_id,
    )


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the app with the in-memory store."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _make_user(name: str, email: str, role: str) -> SimpleNamespace:
    store = get_memory_store().session()
    user_id = await UserService(store).create_profile(name, email, role=role)
    await store.commit()
    token = create_access_token(user_id, role)
    return SimpleNamespace(id=user_id, headers={"Authorization": f"Bearer {token}"})


@pytest_asyncio.fixture
async def admin(client: AsyncClient) -> SimpleNamespace:
    return await _make_user("Grace Admin", "grace@example.com", "admin")


@pytest_asyncio.fixture
async def user(client: AsyncClient) -> SimpleNamespace:
    return await _make_user("Alan User", "alan@example.com", "user")
