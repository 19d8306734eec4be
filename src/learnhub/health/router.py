"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from learnhub.config import get_settings
from learnhub.dependencies import get_store
from learnhub.entities import USERS
from learnhub.redis_client import get_redis
from learnhub.store import DocumentStore

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: 200 while the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    store: DocumentStore = Depends(get_store),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: document store and (when configured) Redis connectivity."""
    checks: dict[str, object] = {}

    try:
        await store.query(USERS, limit=1)
        checks["store"] = "ok"
    except Exception as exc:
        checks["store"] = f"error: {exc}"

    redis = get_redis()
    if redis is None:
        checks["redis"] = "disabled"
    else:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except Exception as exc:
            checks["redis"] = f"error: {exc}"

    all_ok = all(v in ("ok", "disabled") for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
