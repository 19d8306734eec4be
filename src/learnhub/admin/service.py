"""Admin dashboard statistics and progress reports."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from learnhub.admin.schemas import DailyCount, DashboardStats, ProgressReportEntry
from learnhub.entities import (
    BADGES,
    COURSES,
    PROGRESS,
    QUIZZES,
    SKILLS,
    USERS,
    Course,
    Progress,
    Quiz,
    Skill,
    User,
)
from learnhub.store import DocumentStore, Filter, Repository, StoreError

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown user"
UNKNOWN_SKILL = "Unknown skill"


class AdminStatsService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def _count(self, collection: str, *filters: Filter) -> int:
        return len(await self.store.query(collection, filters))

    async def completions_by_date(self, days: int = 7) -> list[DailyCount]:
        """Completed progress records per day, for the latest ``days`` dates that have any."""
        grouped: dict[str, int] = {}
        for doc in await self.store.query(PROGRESS, [Filter("completed", True)]):
            stamp = doc.data.get("completedAt") or doc.data.get("startedAt")
            if not stamp:
                continue
            date = str(stamp)[:10]
            grouped[date] = grouped.get(date, 0) + 1
        return [DailyCount(date=d, count=c) for d, c in sorted(grouped.items())[-days:]]

    async def new_users_since(self, since: datetime) -> int:
        users = Repository(self.store, USERS, User)
        return sum(1 for u in await users.list_all() if u.created_at and u.created_at >= since)

    async def dashboard(self) -> DashboardStats:
        week_ago = datetime.now(timezone.utc) - timedelta(days=7)
        return DashboardStats(
            total_users=await self._count(USERS),
            total_skills=await self._count(SKILLS),
            total_courses=await self._count(COURSES),
            total_quizzes=await self._count(QUIZZES),
            total_badges=await self._count(BADGES, Filter("userId", None)),
            new_users_this_week=await self.new_users_since(week_ago),
            completions_by_date=await self.completions_by_date(),
        )


class AdminProgressService:
    """Progress reports; missing users, quizzes or skills show as placeholders."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.progress = Repository(store, PROGRESS, Progress)
        self.users = Repository(store, USERS, User)
        self.courses = Repository(store, COURSES, Course)
        self.quizzes = Repository(store, QUIZZES, Quiz)
        self.skills = Repository(store, SKILLS, Skill)
        self._user_names: dict[str, str] = {}

    async def _user_name(self, user_id: str) -> str:
        if user_id not in self._user_names:
            try:
                user = await self.users.get(user_id)
            except StoreError:
                logger.warning("User lookup failed for %s", user_id, exc_info=True)
                user = None
            self._user_names[user_id] = user.name if user else UNKNOWN_USER
        return self._user_names[user_id]

    async def _quiz_title(self, quiz_id: str | None) -> str | None:
        if not quiz_id:
            return None
        try:
            quiz = await self.quizzes.get(quiz_id)
        except StoreError:
            logger.warning("Quiz lookup failed for %s", quiz_id, exc_info=True)
            return None
        return quiz.title if quiz else None

    async def _skill_name(self, record: Progress) -> str | None:
        course_id = record.parent_course_id if record.lesson_id else record.course_id
        skill_id = None
        try:
            if course_id:
                course = await self.courses.get(course_id)
                skill_id = course.skill_id if course else None
            elif record.quiz_id:
                quiz = await self.quizzes.get(record.quiz_id)
                skill_id = quiz.skill_id if quiz else None
            if skill_id is None:
                return None
            skill = await self.skills.get(skill_id)
        except StoreError:
            logger.warning("Skill lookup failed for progress %s", record.id, exc_info=True)
            return UNKNOWN_SKILL
        return skill.name if skill else UNKNOWN_SKILL

    async def _entry(self, record: Progress, quiz_title: bool = False, skill_name: bool = False) -> ProgressReportEntry:
        return ProgressReportEntry(
            id=record.id,
            user_id=record.user_id,
            user_name=await self._user_name(record.user_id),
            lesson_id=record.lesson_id,
            course_id=record.course_id,
            quiz_id=record.quiz_id,
            quiz_title=await self._quiz_title(record.quiz_id) if quiz_title else None,
            skill_name=await self._skill_name(record) if skill_name else None,
            percentage=record.percentage,
            completed=record.completed,
            started_at=record.started_at,
            last_accessed_at=record.last_accessed_at,
            completed_at=record.completed_at,
        )

    async def by_user(self, user_id: str) -> list[ProgressReportEntry]:
        records = await self.progress.find_ordered("lastAccessedAt", descending=True, userId=user_id)
        return [await self._entry(r) for r in records]

    async def by_skill(self, skill_id: str) -> list[ProgressReportEntry]:
        """Course-level records for every course of the skill."""
        entries = []
        for course in await self.courses.find(skillId=skill_id):
            for record in await self.progress.find(courseId=course.id):
                entries.append(await self._entry(record))
        return entries

    async def quiz_scores(self) -> list[ProgressReportEntry]:
        """Quiz records grouped by quiz, best percentage first within a quiz."""
        records = await self.progress.find_where(Filter("quizId", None, op="!="))
        records.sort(key=lambda r: (r.quiz_id or "", -r.percentage))
        return [await self._entry(r, quiz_title=True) for r in records]

    async def learning_history(self, limit: int | None = None) -> list[ProgressReportEntry]:
        records = await self.progress.find_ordered("lastAccessedAt", descending=True, limit=limit)
        return [await self._entry(r, skill_name=True) for r in records]
