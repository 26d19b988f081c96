"""Uniqueness and completeness rules for assessments (no IO).

At most one PRE_ASSESSMENT and one POST_ASSESSMENT per subject, at most one
QUIZ per (subject, topic). Subjects match on either the cached name or the
id. The assessment being edited never conflicts with itself.
"""
from __future__ import annotations

from typing import Iterable, Optional

from assessments.models.assessment import Assessment, AssessmentType
from core.exceptions.errors import ValidationError


def find_conflict(candidate: Assessment, existing: Iterable[Assessment]) -> Optional[str]:
    """Message describing a uniqueness violation, or None.

    Runs on every type/subject/topic change of a draft. A QUIZ without a
    topic is not checked yet.
    """
    refs = candidate.subject_refs()
    if not refs:
        return None
    others = [a for a in existing if candidate.id is None or a.id != candidate.id]

    if candidate.type in (AssessmentType.PRE_ASSESSMENT, AssessmentType.POST_ASSESSMENT):
        clash = any(a.type is candidate.type and a.subject_refs() & refs for a in others)
        return f"A {candidate.type.label} already exists for this subject." if clash else None

    if not candidate.topic_id:
        return None
    clash = any(
        a.type is AssessmentType.QUIZ
        and a.subject_refs() & refs
        and a.topic_id == candidate.topic_id
        for a in others
    )
    return "A Quiz already exists for this specific topic." if clash else None


def validate_for_save(candidate: Assessment, existing: Iterable[Assessment]) -> None:
    """Raise ValidationError with the first blocking message."""
    if not (candidate.title or "").strip():
        raise ValidationError("Title is required.")
    if not candidate.subject_refs():
        raise ValidationError("Please select a Subject.")
    if candidate.type is AssessmentType.QUIZ and not candidate.topic_id:
        raise ValidationError("Please select a Topic for the Quiz.")
    conflict = find_conflict(candidate, existing)
    if conflict:
        raise ValidationError(f"Validation Error: {conflict}")
