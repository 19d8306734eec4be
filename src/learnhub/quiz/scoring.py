"""Quiz answer matching and scoring."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from learnhub.entities import Question
from learnhub.progress.aggregation import percentage


def check_answer(correct: str | None, submitted: str | None) -> bool:
    """Trimmed, case-insensitive equality."""
    return (correct or "").strip().lower() == (submitted or "").strip().lower()


@dataclass(frozen=True)
class QuizScore:
    score: int
    total: int
    percentage: int
    correct: frozenset[str] = frozenset()

    def passed(self, passing_score: int) -> bool:
        return self.percentage >= passing_score


def score_quiz(questions: Iterable[Question], answers: Mapping[str, str]) -> QuizScore:
    """Sum the points of correctly answered questions.

    ``answers`` maps question id to the submitted answer; unanswered
    questions are compared as the empty string.
    """
    score = 0
    total = 0
    correct: set[str] = set()
    for question in questions:
        total += question.points
        if check_answer(question.correct_answer, answers.get(question.id, "")):
            score += question.points
            correct.add(question.id)
    return QuizScore(score=score, total=total, percentage=percentage(score, total), correct=frozenset(correct))
