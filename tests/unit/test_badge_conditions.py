"""Badge condition decoding and evaluation."""

import pydantic
import pytest

from learnhub.entities import (
    CompleteCoursesCondition,
    CompleteSkillsCondition,
    CustomCondition,
    QuizScoreCondition,
)
from learnhub.gamification.conditions import Facts, evaluate_condition, parse_condition, references_skill


class TestParseCondition:
    def test_variants_by_type(self):
        assert isinstance(parse_condition({"type": "quiz_score", "value": 80}), QuizScoreCondition)
        assert isinstance(parse_condition({"type": "complete_skills", "value": 3}), CompleteSkillsCondition)
        assert isinstance(parse_condition({"type": "complete_courses", "value": 2}), CompleteCoursesCondition)
        assert isinstance(parse_condition({"type": "custom"}), CustomCondition)

    def test_camel_case_fields(self):
        condition = parse_condition({"type": "complete_skills", "value": 1, "skillIds": ["s1", "s2"]})
        assert condition.skill_ids == ["s1", "s2"]

    def test_skill_ids_kept_on_every_type(self):
        condition = parse_condition({"type": "quiz_score", "value": 80, "skillIds": ["s1"], "quizId": "q1"})
        assert condition.skill_ids == ["s1"]
        assert condition.quiz_id == "q1"
        condition = parse_condition({"type": "complete_courses", "value": 2, "skillIds": ["s2"]})
        assert condition.skill_ids == ["s2"]

    def test_unknown_type_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            parse_condition({"type": "streak", "value": 7})


class TestEvaluateCondition:
    def test_quiz_score_threshold_inclusive(self):
        condition = QuizScoreCondition(value=80)
        assert evaluate_condition(condition, Facts(quiz_percentage=80))
        assert not evaluate_condition(condition, Facts(quiz_percentage=79))

    def test_quiz_score_bound_to_other_quiz(self):
        condition = QuizScoreCondition(value=50, quiz_id="quiz-a")
        assert not evaluate_condition(condition, Facts(quiz_percentage=100, quiz_id="quiz-b"))
        assert evaluate_condition(condition, Facts(quiz_percentage=100, quiz_id="quiz-a"))

    def test_complete_skills(self):
        condition = CompleteSkillsCondition(value=3)
        assert not evaluate_condition(condition, Facts(completed_skills=2))
        assert evaluate_condition(condition, Facts(completed_skills=3))

    def test_complete_courses(self):
        condition = CompleteCoursesCondition(value=2)
        assert not evaluate_condition(condition, Facts(completed_courses=1))
        assert evaluate_condition(condition, Facts(completed_courses=4))

    def test_custom_never_satisfied(self):
        assert not evaluate_condition(CustomCondition(value=1), Facts(quiz_percentage=100, completed_skills=9))


def test_references_skill():
    assert references_skill(CompleteSkillsCondition(value=1, skill_ids=["s1"]), "s1")
    assert not references_skill(CompleteSkillsCondition(value=1), "s1")
    assert not references_skill(QuizScoreCondition(value=80), "s1")
    assert references_skill(QuizScoreCondition(value=80, skill_ids=["s1"]), "s1")
    assert references_skill(CompleteCoursesCondition(value=2, skill_ids=["s1"]), "s1")
    assert not references_skill(None, "s1")
