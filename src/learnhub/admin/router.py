"""Admin dashboard endpoints: statistics and progress reports."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from learnhub.admin.schemas import DashboardStats, ProgressReportEntry
from learnhub.admin.service import AdminProgressService, AdminStatsService
from learnhub.auth.dependencies import get_current_admin
from learnhub.dependencies import get_store
from learnhub.entities import User
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> DashboardStats:
    return await AdminStatsService(store).dashboard()


@router.get("/progress/users/{user_id}", response_model=list[ProgressReportEntry])
async def progress_by_user(
    user_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ProgressReportEntry]:
    return await AdminProgressService(store).by_user(user_id)


@router.get("/progress/skills/{skill_id}", response_model=list[ProgressReportEntry])
async def progress_by_skill(
    skill_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ProgressReportEntry]:
    return await AdminProgressService(store).by_skill(skill_id)


@router.get("/progress/quiz-scores", response_model=list[ProgressReportEntry])
async def quiz_scores(
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ProgressReportEntry]:
    return await AdminProgressService(store).quiz_scores()


@router.get("/progress/history", response_model=list[ProgressReportEntry])
async def learning_history(
    limit: int | None = Query(None, ge=1, le=1000),
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[ProgressReportEntry]:
    return await AdminProgressService(store).learning_history(limit)
