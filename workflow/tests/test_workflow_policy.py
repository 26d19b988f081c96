"""Approval lifecycle transitions."""
from __future__ import annotations

import pytest

from core.exceptions.errors import PolicyViolationError
from core.models.user import User, UserRole
from workflow.enum.content_status import ContentStatus
from workflow.services.policy.workflow_policy import (
    ReviewDecision,
    WorkflowAction,
    WorkflowPolicy,
)

REVIEWER = User(id="1", email="admin@cvsu.edu.ph", name="ADMIN", role=UserRole.ADMIN)


@pytest.fixture
def policy() -> WorkflowPolicy:
    return WorkflowPolicy()


def test_new_entity_saves_as_draft_and_submits_to_pending(policy) -> None:
    assert policy.next_status(WorkflowAction.SAVE_DRAFT, None) is ContentStatus.DRAFT
    assert policy.next_status(WorkflowAction.SUBMIT, ContentStatus.DRAFT) is ContentStatus.PENDING


def test_resubmitting_approved_item_demotes_to_pending(policy) -> None:
    assert policy.next_status(WorkflowAction.SUBMIT, ContentStatus.APPROVED) is ContentStatus.PENDING


def test_restore_only_from_removal_pending(policy) -> None:
    assert policy.next_status(WorkflowAction.RESTORE, ContentStatus.REMOVAL_PENDING) is ContentStatus.DRAFT
    with pytest.raises(PolicyViolationError):
        policy.next_status(WorkflowAction.RESTORE, ContentStatus.DRAFT)


def test_removal_pending_blocks_review(policy) -> None:
    assert not policy.can(WorkflowAction.APPROVE, ContentStatus.REMOVAL_PENDING)
    assert policy.allowed_actions(ContentStatus.REMOVAL_PENDING) == [
        WorkflowAction.MARK_FOR_REMOVAL, WorkflowAction.RESTORE,
    ]


def test_review_approve_has_no_note_for_blank_text(policy) -> None:
    outcome = policy.review(ReviewDecision.APPROVE, ContentStatus.PENDING, REVIEWER, "   ")
    assert outcome.status is ContentStatus.APPROVED
    assert outcome.note is None
    assert not outcome.counts_as_revision


def test_review_revision_carries_note(policy) -> None:
    outcome = policy.review("REVISION", ContentStatus.PENDING, REVIEWER, " Add references. ")
    assert outcome.status is ContentStatus.REVISION_REQUESTED
    assert outcome.counts_as_revision
    assert outcome.note.note == "Add references."
    assert outcome.note.admin_name == "ADMIN"
    assert outcome.note.id.startswith("rn-")
