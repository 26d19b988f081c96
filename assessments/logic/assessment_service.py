"""
assessments/logic/assessment_service.py
=======================================

Editing, validation, review and deletion of assessments.

Draft helpers (subject selection, question editing) mutate the editor's
``Assessment`` draft in memory. ``save_assessment`` validates first and
stores a copy; a blocked save leaves the draft and storage untouched.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Tuple

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from assessments.logic.assessment_repository import AssessmentRepository
from assessments.logic.assessment_rules import find_conflict, validate_for_save
from assessments.models.assessment import OPTION_COUNT, Assessment, AssessmentType, MCQQuestion
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import NotFoundError, ValidationError
from core.helpers.date_time_helper import utc_now_iso
from core.helpers.id_generator import new_id
from core.helpers.query_helper import matches_search
from core.logging.logic.activity_logger import ActivityLogger
from curriculum.logic.subject_repository import SubjectRepository
from workflow.enum.content_status import ContentStatus
from workflow.services.policy.workflow_policy import ReviewDecision, WorkflowPolicy, workflow_policy

logger = logging.getLogger(__name__)

TYPE_FILTER_ALL = "ALL"


class AssessmentService:
    def __init__(
        self,
        repository: AssessmentRepository,
        subjects: SubjectRepository,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        policy: WorkflowPolicy = workflow_policy,
        latency: OperationLatency | None = None,
    ) -> None:
        self._repo = repository
        self._subjects = subjects
        self._guard = guard
        self._activity = activity
        self._policy = policy
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    def list_assessments(self, query: Optional[str] = None,
                         type_filter: "str | AssessmentType" = TYPE_FILTER_ALL) -> List[Assessment]:
        wanted = None if type_filter == TYPE_FILTER_ALL else AssessmentType(type_filter)
        return [
            a for a in self._repo.load_all()
            if matches_search(query, a.title) and (wanted is None or a.type is wanted)
        ]

    def get_assessment(self, assessment_id: str) -> Assessment:
        found = self._repo.get(assessment_id)
        if found is None:
            raise NotFoundError("Assessment", assessment_id)
        return found

    # ------------------------------------------------------------------ #
    #  Draft editing                                                     #
    # ------------------------------------------------------------------ #
    @staticmethod
    def new_assessment(type_: AssessmentType = AssessmentType.PRE_ASSESSMENT) -> Assessment:
        return Assessment(id=None, title="", type=AssessmentType(type_))

    def select_subject(self, draft: Assessment, subject_ref: str) -> Assessment:
        """Bind the draft to a subject (by id or name); resets the topic."""
        subject = self._subjects.find_by_name_or_id(subject_ref)
        if subject is None:
            raise NotFoundError("Subject", subject_ref)
        draft.subject_id = subject.id
        draft.subject = subject.name
        draft.topic_id = None
        return draft

    def available_topics(self, draft: Assessment) -> List[Tuple[str, str]]:
        """``(id, title)`` of every topic of the draft's subject, pre-order."""
        subject = None
        for ref in (draft.subject_id, draft.subject):
            if ref:
                subject = self._subjects.find_by_name_or_id(ref)
                if subject is not None:
                    break
        if subject is None:
            return []
        return [(t.id, t.title) for t in subject.topics]

    def validation_message(self, draft: Assessment) -> Optional[str]:
        return find_conflict(draft, self._repo.load_all())

    @staticmethod
    def add_question(draft: Assessment) -> MCQQuestion:
        question = MCQQuestion(id=new_id("q"))
        draft.questions.append(question)
        draft.items = len(draft.questions)
        return question

    @staticmethod
    def update_question(draft: Assessment, question_id: str, **changes) -> MCQQuestion:
        for idx, question in enumerate(draft.questions):
            if question.id == question_id:
                updated = dataclasses.replace(question, **changes)
                if len(updated.options) != OPTION_COUNT:
                    raise ValidationError(f"A question needs exactly {OPTION_COUNT} options.")
                if not 0 <= updated.correct_answer < OPTION_COUNT:
                    raise ValidationError("Correct answer must point to one of the options.")
                draft.questions[idx] = updated
                return updated
        raise NotFoundError("Question", question_id)

    @staticmethod
    def remove_question(draft: Assessment, question_id: str) -> None:
        kept = [q for q in draft.questions if q.id != question_id]
        if len(kept) == len(draft.questions):
            raise NotFoundError("Question", question_id)
        draft.questions = kept
        draft.items = len(kept)

    # ------------------------------------------------------------------ #
    #  Save                                                              #
    # ------------------------------------------------------------------ #
    def save_assessment(self, draft: Assessment,
                        status: ContentStatus = ContentStatus.DRAFT) -> Assessment:
        self._latency.pause("assessment.save")
        # create and re-save share one permission
        author = self._guard.require_permission(perm.CREATE_ASSESSMENTS)
        validate_for_save(draft, self._repo.load_all())
        if draft.id is not None:
            self.get_assessment(draft.id)

        now = utc_now_iso()
        saved = dataclasses.replace(
            draft,
            id=draft.id or new_id("as"),
            status=ContentStatus(status),
            items=len(draft.questions),
            questions=[dataclasses.replace(q, options=list(q.options)) for q in draft.questions],
            author_id=draft.author_id or author.id,
            author_name=draft.author_name or author.name,
            date_created=draft.date_created or now,
            last_updated=now,
            revision_notes=list(draft.revision_notes),
        )
        self._repo.upsert(saved)
        logger.info("Assessment %s saved as %s", saved.id, saved.status.value)
        self._activity.log("Updated Assessment" if draft.id else "Created Assessment",
                           saved.title, saved.id)
        return saved

    # ------------------------------------------------------------------ #
    #  Review / Delete                                                   #
    # ------------------------------------------------------------------ #
    def review_assessment(self, assessment_id: str, decision: ReviewDecision,
                          note: str = "") -> Assessment:
        self._latency.pause("assessment.review")
        admin = self._guard.require_admin()
        current = self.get_assessment(assessment_id)
        outcome = self._policy.review(decision, current.status, admin, note)
        notes = list(current.revision_notes)
        if outcome.note is not None:
            notes.append(outcome.note)
        updated = dataclasses.replace(current, status=outcome.status, revision_notes=notes)
        self._repo.upsert(updated)
        self._activity.log(
            "Approved Assessment" if outcome.status is ContentStatus.APPROVED else "Requested Assessment Revision",
            updated.title, updated.id,
        )
        return updated

    def delete_assessment(self, assessment_id: str) -> None:
        self._latency.pause("assessment.delete")
        self._guard.require_permission(perm.DELETE_ASSESSMENTS)
        current = self.get_assessment(assessment_id)
        self._repo.delete(assessment_id)
        self._activity.log("Deleted Assessment", current.title, current.id)
