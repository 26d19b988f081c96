"""
curriculum/logic/subject_service.py
===================================

Business logic for curriculum subjects.

Authors edit a ``Subject`` draft in memory (metadata and topic tree) and hand
it to ``save_subject``. New subjects are stored as DRAFT; every save of an
existing subject re-enters PENDING and forces a new review. Admin approval
cascades into the topic tree; a revision request leaves it untouched.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from core.helpers.date_time_helper import utc_now_iso
from core.helpers.id_generator import new_id
from core.helpers.query_helper import matches_search
from core.logging.logic.activity_logger import ActivityLogger
from curriculum.logic.subject_repository import SubjectRepository
from curriculum.models.subject import Subject
from curriculum.models.topic import Topic
from workflow.enum.content_status import ContentStatus
from workflow.services.policy.workflow_policy import (
    ReviewDecision,
    WorkflowAction,
    WorkflowPolicy,
    workflow_policy,
)

logger = logging.getLogger(__name__)

ROOT_TOPIC_TITLE = "Untitled Module"
SUB_TOPIC_TITLE = "New Sub-Topic"


class SubjectService:
    def __init__(
        self,
        repository: SubjectRepository,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        policy: WorkflowPolicy = workflow_policy,
        latency: OperationLatency | None = None,
    ) -> None:
        self._repo = repository
        self._guard = guard
        self._activity = activity
        self._policy = policy
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    def list_subjects(self, query: Optional[str] = None) -> List[Subject]:
        return [s for s in self._repo.load_all()
                if matches_search(query, s.name, s.description)]

    def get_subject(self, subject_id: str) -> Subject:
        subject = self._repo.get(subject_id)
        if subject is None:
            raise NotFoundError("Subject", subject_id)
        return subject

    def total_topic_units(self) -> int:
        return sum(s.topic_count() for s in self._repo.load_all())

    # ------------------------------------------------------------------ #
    #  Draft editing (in memory, nothing is stored)                      #
    # ------------------------------------------------------------------ #
    @staticmethod
    def new_subject(name: str = "", description: str = "", color: str = "#1e40af") -> Subject:
        return Subject(id=None, name=name, description=description, color=color)

    @staticmethod
    def add_topic(subject: Subject, parent_id: Optional[str] = None) -> Topic:
        """Append a DRAFT module (root) or sub-topic to the draft's tree."""
        topic = Topic(
            id=new_id("t"),
            title=SUB_TOPIC_TITLE if parent_id else ROOT_TOPIC_TITLE,
            status=ContentStatus.DRAFT,
        )
        return subject.topics.add(topic, parent_id)

    # ------------------------------------------------------------------ #
    #  Save                                                              #
    # ------------------------------------------------------------------ #
    def save_subject(self, subject: Subject) -> Subject:
        """Persist a draft; returns the stored copy and leaves *subject* untouched."""
        self._latency.pause("subject.save")
        author = self._guard.require_permission(perm.EDIT_SUBJECTS)
        if not (subject.name or "").strip():
            raise ValidationError("Subject name is required.")

        existing = not subject.is_new
        if existing and self._repo.get(subject.id) is None:
            raise NotFoundError("Subject", subject.id)

        action = WorkflowAction.SUBMIT if existing else WorkflowAction.SAVE_DRAFT
        saved = dataclasses.replace(
            subject,
            id=subject.id or new_id("s"),
            status=self._policy.next_status(action, subject.status),
            topics=subject.topics.copy(),
            revision_notes=list(subject.revision_notes),
            author_name=author.name,
            last_updated=utc_now_iso(),
        )
        self._repo.upsert(saved)
        logger.info("Subject %s saved as %s", saved.id, saved.status.value)
        self._activity.log("Updated Subject Shell" if existing else "Created Subject Shell",
                           saved.name, saved.id)
        return saved

    # ------------------------------------------------------------------ #
    #  Review                                                            #
    # ------------------------------------------------------------------ #
    def review_subject(self, subject_id: str, decision: ReviewDecision, note: str = "") -> Subject:
        self._latency.pause("subject.review")
        admin = self._guard.require_admin()
        subject = self.get_subject(subject_id)
        if subject.is_fully_approved:
            raise PolicyViolationError("Subject is already fully approved.")

        outcome = self._policy.review(decision, subject.status, admin, note)
        topics = subject.topics.copy()
        if outcome.status is ContentStatus.APPROVED:
            dropped = topics.approve_all()
            if dropped:
                logger.info("Subject %s: dropped %d topic(s) marked for removal", subject_id, len(dropped))

        notes = list(subject.revision_notes)
        if outcome.note is not None:
            notes.append(outcome.note)
        updated = dataclasses.replace(
            subject,
            status=outcome.status,
            topics=topics,
            revision_notes=notes,
            last_updated=utc_now_iso(),
        )
        self._repo.upsert(updated)
        self._activity.log(
            "Approved Subject" if outcome.status is ContentStatus.APPROVED else "Requested Subject Revision",
            updated.name, updated.id,
        )
        return updated

    # ------------------------------------------------------------------ #
    #  Delete                                                            #
    # ------------------------------------------------------------------ #
    def delete_subject(self, subject_id: str) -> None:
        """Remove a subject; assessments and content referencing it are kept."""
        self._latency.pause("subject.delete")
        self._guard.require_permission(perm.MANAGE_CURRICULUM)
        subject = self.get_subject(subject_id)
        self._repo.delete(subject_id)
        self._activity.log("Deleted Subject", subject.name, subject.id)
