"""Uniqueness rules per subject and per (subject, topic)."""
from __future__ import annotations

import pytest

from assessments.logic.assessment_rules import find_conflict, validate_for_save
from assessments.models.assessment import Assessment, AssessmentType
from core.exceptions.errors import ValidationError

EXISTING = [
    Assessment(id="as-1", title="Personality Pre-Test", type=AssessmentType.PRE_ASSESSMENT,
               subject="Theories of Personality", subject_id="s-1"),
    Assessment(id="as-2", title="Freud Quiz", type=AssessmentType.QUIZ,
               subject="Theories of Personality", subject_id="s-1", topic_id="t-1"),
    # legacy record: id stored in the name slot
    Assessment(id="as-3", title="Abnormal Post-Test", type=AssessmentType.POST_ASSESSMENT, subject="s-2"),
]


def test_second_pre_assessment_for_subject_conflicts() -> None:
    candidate = Assessment(id=None, title="Another", type=AssessmentType.PRE_ASSESSMENT, subject_id="s-1")
    assert find_conflict(candidate, EXISTING) == "A Pre-Assessment already exists for this subject."


def test_subject_matches_by_id_or_cached_name() -> None:
    candidate = Assessment(id=None, title="Post", type=AssessmentType.POST_ASSESSMENT,
                           subject="Abnormal Psychology", subject_id="s-2")
    assert find_conflict(candidate, EXISTING) == "A Post-Assessment already exists for this subject."


def test_editing_record_does_not_conflict_with_itself() -> None:
    assert find_conflict(EXISTING[0], EXISTING) is None


def test_quiz_conflicts_only_on_same_topic() -> None:
    same = Assessment(id=None, title="Q", type=AssessmentType.QUIZ, subject_id="s-1", topic_id="t-1")
    other = Assessment(id=None, title="Q", type=AssessmentType.QUIZ, subject_id="s-1", topic_id="t-2")
    no_topic = Assessment(id=None, title="Q", type=AssessmentType.QUIZ, subject_id="s-1")
    assert find_conflict(same, EXISTING) == "A Quiz already exists for this specific topic."
    assert find_conflict(other, EXISTING) is None
    assert find_conflict(no_topic, EXISTING) is None


@pytest.mark.parametrize(
    "candidate, message",
    [
        (Assessment(id=None, title=" ", subject_id="s-3"), "Title is required."),
        (Assessment(id=None, title="Pre"), "Please select a Subject."),
        (Assessment(id=None, title="Quiz", type=AssessmentType.QUIZ, subject_id="s-3"),
         "Please select a Topic for the Quiz."),
        (Assessment(id=None, title="Pre", subject_id="s-1"),
         "Validation Error: A Pre-Assessment already exists for this subject."),
    ],
)
def test_validate_for_save_reports_first_problem(candidate, message) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_for_save(candidate, EXISTING)
