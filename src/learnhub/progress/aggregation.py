"""Completion percentages for courses and skills.

All percentages are integers rounded half-up; an empty denominator yields 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal


def percentage(part: int, total: int) -> int:
    """round(100 * part / total), half-up, clamped to [0, 100]."""
    if total <= 0:
        return 0
    value = (Decimal(100) * Decimal(part) / Decimal(total)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(value)))


def course_percentage(lesson_ids: Iterable[str], completed_lesson_ids: Iterable[str]) -> int:
    """Share of a course's lessons the user has completed."""
    lessons = list(dict.fromkeys(lesson_ids))
    done = set(completed_lesson_ids)
    return percentage(sum(1 for lesson_id in lessons if lesson_id in done), len(lessons))


def completed_count(ids: Iterable[str], completed_ids: Iterable[str]) -> int:
    done = set(completed_ids)
    return sum(1 for item in dict.fromkeys(ids) if item in done)


def skill_level(course_ids: Iterable[str], completed_course_ids: Iterable[str]) -> int:
    """Share of a skill's courses with a completed course-level record."""
    courses = list(dict.fromkeys(course_ids))
    return percentage(completed_count(courses, completed_course_ids), len(courses))
