"""Badge unlock conditions: decoding and evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter

from learnhub.entities import (
    BadgeCondition,
    CompleteCoursesCondition,
    CompleteSkillsCondition,
    CustomCondition,
    QuizScoreCondition,
)

_adapter: TypeAdapter[BadgeCondition] = TypeAdapter(BadgeCondition)


def parse_condition(raw: dict[str, Any]) -> BadgeCondition:
    """Decode a stored ``{type, value, ...}`` mapping into its condition variant.

    Raises pydantic.ValidationError for unknown types or missing fields.
    """
    return _adapter.validate_python(raw)


@dataclass(frozen=True)
class Facts:
    """What is known about the user when conditions are evaluated."""

    quiz_percentage: int = 0
    quiz_id: str | None = None
    completed_skills: int = 0
    completed_courses: int = 0


def evaluate_condition(condition: BadgeCondition, facts: Facts) -> bool:
    match condition:
        case QuizScoreCondition(value=value, quiz_id=quiz_id):
            if quiz_id and facts.quiz_id and quiz_id != facts.quiz_id:
                return False
            return facts.quiz_percentage >= value
        case CompleteSkillsCondition(value=value):
            return facts.completed_skills >= value
        case CompleteCoursesCondition(value=value):
            return facts.completed_courses >= value
        case CustomCondition():
            # no evaluation defined for custom rules
            return False
    msg = f"Unhandled badge condition: {condition!r}"
    raise TypeError(msg)


def references_skill(condition: BadgeCondition | None, skill_id: str) -> bool:
    return condition is not None and skill_id in (condition.skill_ids or [])
