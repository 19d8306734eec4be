"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from learnhub.admin.router import router as admin_router
from learnhub.auth.router import router as auth_router
from learnhub.catalog.router import router as catalog_router
from learnhub.config import get_settings
from learnhub.database import close_db, init_db
from learnhub.enrollment.router import router as enrollment_router
from learnhub.gamification.router import router as gamification_router
from learnhub.health.router import router as health_router
from learnhub.middleware import setup_middleware
from learnhub.progress.router import router as progress_router
from learnhub.quiz.router import router as quiz_router
from learnhub.redis_client import close_redis, init_redis
from learnhub.social.router import router as social_router
from learnhub.users.router import router as users_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    if settings.store_backend == "sql":
        await init_db(settings.database_url, create_schema=settings.create_schema)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="LearnHub API",
        description="Skills, courses, quizzes, progress tracking and badges",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(catalog_router)
    app.include_router(enrollment_router)
    app.include_router(progress_router)
    app.include_router(quiz_router)
    app.include_router(gamification_router)
    app.include_router(social_router)
    app.include_router(admin_router)

    @app.get("/api/v1/client-config", tags=["Health"])
    async def client_config() -> dict[str, str]:
        """Project binding clients need to talk to the same backend project."""
        current = get_settings()
        return {
            "projectId": current.project_id,
            "apiKey": current.api_key,
            "storageBucket": current.storage_bucket,
            "messagingSenderId": current.messaging_sender_id,
            "appId": current.app_id,
        }

    return app


app = create_app()
