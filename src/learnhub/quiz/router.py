"""Quiz endpoints: taking quizzes, and their administration."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from learnhub.auth.dependencies import get_current_admin, get_current_user
from learnhub.dependencies import get_store
from learnhub.entities import Question, Quiz, User
from learnhub.quiz.schemas import (
    PublicQuestion,
    QuestionCreate,
    QuestionUpdate,
    QuizCreate,
    QuizResult,
    QuizSubmission,
    QuizSubmissionResponse,
    QuizUpdate,
    QuizWithQuestionsResponse,
)
from learnhub.quiz.service import QuizService
from learnhub.redis_client import get_redis
from learnhub.store import DocumentStore

router = APIRouter(prefix="/api/v1", tags=["Quizzes"])


@router.get("/quizzes", response_model=list[Quiz])
async def list_quizzes(
    skill_id: str | None = Query(None, alias="skillId"),
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> list[Quiz]:
    svc = QuizService(store)
    if skill_id:
        return await svc.quizzes_for_skill(skill_id)
    return await svc.list_quizzes()


@router.get("/quizzes/{quiz_id}", response_model=QuizWithQuestionsResponse)
async def get_quiz(
    quiz_id: str,
    _user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> QuizWithQuestionsResponse:
    """Quiz with its ordered questions, without the correct answers."""
    quiz, questions = await QuizService(store).get_quiz_with_questions(quiz_id)
    return QuizWithQuestionsResponse(
        quiz=quiz, questions=[PublicQuestion.from_question(q) for q in questions]
    )


@router.post("/quizzes/{quiz_id}/submit", response_model=QuizSubmissionResponse)
async def submit_quiz(
    quiz_id: str,
    body: QuizSubmission,
    user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> QuizSubmissionResponse:
    """Score the answers; a pass on a skill quiz validates the skill."""
    result = await QuizService(store, get_redis()).submit(user.id, quiz_id, body.answers)
    await store.commit()
    return QuizSubmissionResponse(
        score=result.score.score,
        total=result.score.total,
        percentage=result.score.percentage,
        passed=result.passed,
        passing_score=result.passing_score,
        unanswered=result.unanswered,
        skill_validated=result.skill_validated,
        badges_unlocked=result.badges_unlocked,
    )


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------


@router.post("/quizzes", status_code=201)
async def create_quiz(
    body: QuizCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    quiz_id = await QuizService(store).create_quiz(body)
    await store.commit()
    return {"id": quiz_id}


@router.patch("/quizzes/{quiz_id}", response_model=Quiz)
async def update_quiz(
    quiz_id: str,
    body: QuizUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> Quiz:
    svc = QuizService(store)
    await svc.update_quiz(quiz_id, body)
    await store.commit()
    return await svc.require_quiz(quiz_id)


@router.delete("/quizzes/{quiz_id}", status_code=204)
async def delete_quiz(
    quiz_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await QuizService(store).delete_quiz(quiz_id)
    await store.commit()


@router.get("/quizzes/{quiz_id}/questions", response_model=list[Question])
async def quiz_questions(
    quiz_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[Question]:
    """Questions with their correct answers."""
    return await QuizService(store).quiz_questions(quiz_id)


@router.post("/quizzes/{quiz_id}/questions", status_code=201)
async def add_question(
    quiz_id: str,
    body: QuestionCreate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    question_id = await QuizService(store).add_question(quiz_id, body)
    await store.commit()
    return {"id": question_id}


@router.patch("/questions/{question_id}")
async def update_question(
    question_id: str,
    body: QuestionUpdate,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> dict:
    await QuizService(store).update_question(question_id, body)
    await store.commit()
    return {"id": question_id}


@router.delete("/questions/{question_id}", status_code=204)
async def delete_question(
    question_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> None:
    await QuizService(store).delete_question(question_id)
    await store.commit()


@router.get("/quizzes/{quiz_id}/results", response_model=list[QuizResult])
async def quiz_results(
    quiz_id: str,
    _admin: User = Depends(get_current_admin),
    store: DocumentStore = Depends(get_store),
) -> list[QuizResult]:
    return await QuizService(store).quiz_results(quiz_id)
