"""Quizzes: taking and scoring them, and their administration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from learnhub.config import get_settings
from learnhub.entities import (
    COURSES,
    PROGRESS,
    QUESTIONS,
    QUIZZES,
    RESPONSES,
    USERS,
    Badge,
    Course,
    Progress,
    Question,
    Quiz,
    QuizResponse,
    User,
)
from learnhub.errors import NotFoundError, ValidationError
from learnhub.gamification.validation_service import SkillValidationService
from learnhub.progress.service import ProgressService, ProgressTarget
from learnhub.quiz.schemas import QuestionCreate, QuestionUpdate, QuizCreate, QuizResult, QuizUpdate
from learnhub.quiz.scoring import QuizScore, check_answer, score_quiz
from learnhub.store import DocumentStore, Repository
from learnhub.store.codec import build_patch

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    score: QuizScore
    passed: bool
    passing_score: int
    unanswered: int
    skill_validated: bool = False
    badges_unlocked: list[Badge] = field(default_factory=list)


def _check_passing_score(value: int) -> int:
    if not 0 <= value <= 100:
        raise ValidationError("Passing score must be between 0 and 100")
    return value


class QuizService:
    def __init__(self, store: DocumentStore, redis: object = None) -> None:
        self.store = store
        self.redis = redis
        self.quizzes = Repository(store, QUIZZES, Quiz)
        self.questions = Repository(store, QUESTIONS, Question)
        self.responses = Repository(store, RESPONSES, QuizResponse)
        self.progress = Repository(store, PROGRESS, Progress)
        self.users = Repository(store, USERS, User)
        self.courses = Repository(store, COURSES, Course)

    # --- Taking quizzes ---

    async def require_quiz(self, quiz_id: str) -> Quiz:
        quiz = await self.quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        return quiz

    async def quiz_questions(self, quiz_id: str) -> list[Question]:
        """Questions by ascending ``order``."""
        return await self.questions.find_ordered("order", quizId=quiz_id)

    async def get_quiz_with_questions(self, quiz_id: str) -> tuple[Quiz, list[Question]]:
        quiz = await self.require_quiz(quiz_id)
        return quiz, await self.quiz_questions(quiz_id)

    async def quizzes_for_skill(self, skill_id: str) -> list[Quiz]:
        return await self.quizzes.find(skillId=skill_id)

    async def submit(self, user_id: str, quiz_id: str, answers: dict[str, str]) -> SubmissionResult:
        """Score a submission, store its responses and progress, and validate the skill on a pass."""
        quiz, questions = await self.get_quiz_with_questions(quiz_id)
        if not questions:
            raise ValidationError("This quiz has no questions")

        for question in questions:
            submitted = answers.get(question.id, "")
            response = QuizResponse(
                user_id=user_id,
                quiz_id=quiz_id,
                question_id=question.id,
                user_answer=submitted,
                is_correct=check_answer(question.correct_answer, submitted),
            )
            await self.responses.create(response, stamp=("submittedAt",))

        result = score_quiz(questions, answers)
        passed = result.passed(quiz.passing_score)
        unanswered = sum(1 for q in questions if not answers.get(q.id, "").strip())
        await self._record_progress(user_id, quiz_id, result.percentage, passed)
        logger.info(
            "Quiz %s submitted by %s: %d%% (%s)",
            quiz_id, user_id, result.percentage, "passed" if passed else "failed",
        )

        outcome = SubmissionResult(
            score=result,
            passed=passed,
            passing_score=quiz.passing_score,
            unanswered=unanswered,
        )
        if passed and quiz.skill_id:
            validation = await SkillValidationService(self.store, self.redis).validate_skill(
                user_id, quiz.skill_id, result.percentage, quiz_id=quiz_id
            )
            outcome.skill_validated = validation.skill_validated
            outcome.badges_unlocked = validation.badges_unlocked
        return outcome

    async def _record_progress(self, user_id: str, quiz_id: str, percentage: int, passed: bool) -> None:
        """Keep the best attempt: a failed retake never undoes an earlier pass."""
        progress = ProgressService(self.store)
        previous = await progress.find(user_id, ProgressTarget.quiz(quiz_id))
        if previous is not None:
            percentage = max(percentage, previous.percentage)
            passed = passed or previous.completed
        await progress.record_quiz_result(user_id, quiz_id, percentage, passed)

    # --- Administration ---

    async def list_quizzes(self) -> list[Quiz]:
        return await self.quizzes.list_all()

    async def create_quiz(self, data: QuizCreate) -> str:
        if not data.title.strip():
            raise ValidationError("Quiz title is required")
        passing_score = data.passing_score
        if passing_score is None:
            passing_score = get_settings().default_passing_score
        quiz = Quiz(
            title=data.title.strip(),
            skill_id=data.skill_id or None,
            course_id=data.course_id or None,
            passing_score=_check_passing_score(passing_score),
            time_limit=data.time_limit,
            questions=[],
        )
        quiz_id = await self.quizzes.create(quiz, stamp=("createdAt",))
        if quiz.course_id:
            course = await self.courses.get(quiz.course_id)
            if course is not None:
                await self.courses.update(course.id, {"quizzes": [*(course.quizzes or []), quiz_id]})
        logger.info("Quiz created: %s", quiz_id)
        return quiz_id

    async def update_quiz(self, quiz_id: str, data: QuizUpdate) -> None:
        await self.require_quiz(quiz_id)
        patch = build_patch(data)
        if "title" in patch and not (patch["title"] or "").strip():
            raise ValidationError("Quiz title is required")
        if patch.get("passingScore") is not None:
            _check_passing_score(patch["passingScore"])
        await self.quizzes.update(quiz_id, patch)

    async def delete_quiz(self, quiz_id: str) -> None:
        await self.quizzes.delete(quiz_id)

    async def add_question(self, quiz_id: str, data: QuestionCreate) -> str:
        if not data.content.strip():
            raise ValidationError("Question content is required")
        if not data.correct_answer.strip():
            raise ValidationError("Correct answer is required")
        if data.points < 0:
            raise ValidationError("Points cannot be negative")
        quiz = await self.require_quiz(quiz_id)
        order = data.order if data.order is not None else len(quiz.questions or []) + 1
        question = Question(
            content=data.content.strip(),
            quiz_id=quiz_id,
            type=data.type,
            options=data.options,
            correct_answer=data.correct_answer,
            points=data.points,
            order=order,
        )
        question_id = await self.questions.create(question)
        await self.quizzes.update(quiz_id, {"questions": [*(quiz.questions or []), question_id]})
        return question_id

    async def update_question(self, question_id: str, data: QuestionUpdate) -> None:
        if await self.questions.get(question_id) is None:
            raise NotFoundError("Question not found")
        await self.questions.update(question_id, build_patch(data))

    async def delete_question(self, question_id: str) -> None:
        question = await self.questions.get(question_id)
        if question is not None:
            quiz = await self.quizzes.get(question.quiz_id)
            if quiz is not None and quiz.questions:
                await self.quizzes.update(
                    quiz.id, {"questions": [q for q in quiz.questions if q != question_id]}
                )
        await self.questions.delete(question_id)

    async def quiz_results(self, quiz_id: str) -> list[QuizResult]:
        """Every user's quiz record, with the user's name and email when known."""
        results = []
        for record in await self.progress.find(quizId=quiz_id):
            user = await self.users.get(record.user_id)
            results.append(
                QuizResult(
                    progress_id=record.id,
                    user_id=record.user_id,
                    user_name=user.name if user else None,
                    user_email=user.email if user else None,
                    percentage=record.percentage,
                    completed=record.completed,
                    started_at=record.started_at,
                    completed_at=record.completed_at,
                    last_accessed_at=record.last_accessed_at,
                )
            )
        return results
