"""Request and response bodies for quizzes."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from learnhub.entities import Badge, Question, Quiz
from learnhub.schemas import ApiModel

QuestionType = Literal["multiple_choice", "true_false", "text"]


class QuizCreate(ApiModel):
    title: str = ""
    skill_id: str | None = None
    course_id: str | None = None
    passing_score: int | None = None
    time_limit: int | None = None


class QuizUpdate(ApiModel):
    title: str | None = None
    skill_id: str | None = None
    course_id: str | None = None
    passing_score: int | None = None
    time_limit: int | None = None


class QuestionCreate(ApiModel):
    content: str = ""
    type: QuestionType = "multiple_choice"
    options: list[str] | None = None
    correct_answer: str = ""
    points: int = 1
    order: int | None = None


class QuestionUpdate(ApiModel):
    content: str | None = None
    type: QuestionType | None = None
    options: list[str] | None = None
    correct_answer: str | None = None
    points: int | None = None
    order: int | None = None


class PublicQuestion(ApiModel):
    """Question as shown to a learner: no correct answer."""

    id: str
    content: str
    type: QuestionType
    options: list[str] | None = None
    points: int
    order: int | None = None

    @classmethod
    def from_question(cls, question: Question) -> PublicQuestion:
        return cls(
            id=question.id,
            content=question.content,
            type=question.type,
            options=question.options,
            points=question.points,
            order=question.order,
        )


class QuizWithQuestionsResponse(ApiModel):
    quiz: Quiz
    questions: list[PublicQuestion]


class QuizSubmission(ApiModel):
    # question id -> submitted answer
    answers: dict[str, str] = {}


class QuizSubmissionResponse(ApiModel):
    score: int
    total: int
    percentage: int
    passed: bool
    passing_score: int
    unanswered: int
    skill_validated: bool = False
    badges_unlocked: list[Badge] = []


class QuizResult(ApiModel):
    progress_id: str
    user_id: str
    user_name: str | None = None
    user_email: str | None = None
    percentage: int
    completed: bool
    started_at: datetime | None = None
    completed_at: datetime | None = None
    last_accessed_at: datetime | None = None
