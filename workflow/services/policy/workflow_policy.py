"""Workflow policy service (no IO).

Pure transition rules of the approval lifecycle:

    (new) --save--> DRAFT --submit--> PENDING --approve--> APPROVED
                                      PENDING --revision--> REVISION_REQUESTED
    any topic state --mark for removal--> REMOVAL_PENDING --restore--> DRAFT

Authors may save or resubmit from any non-removal state; a save on an
approved subject therefore demotes it to PENDING. Side effects (counters,
cascades, notes) are applied by the feature services.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from core.exceptions.errors import PolicyViolationError
from core.models.user import User
from workflow.enum.content_status import ContentStatus
from workflow.models.revision_note import RevisionNote


class WorkflowAction(str, Enum):
    SAVE_DRAFT = "save_draft"
    SUBMIT = "submit"
    APPROVE = "approve"
    REQUEST_REVISION = "request_revision"
    MARK_FOR_REMOVAL = "mark_for_removal"
    RESTORE = "restore"


class ReviewDecision(str, Enum):
    APPROVE = "APPROVE"
    REVISION = "REVISION"


# None in a from-set stands for "no status yet" (new entity, bare topic)
_EDITABLE: FrozenSet[Optional[ContentStatus]] = frozenset({
    None,
    ContentStatus.DRAFT,
    ContentStatus.PENDING,
    ContentStatus.REVISION_REQUESTED,
    ContentStatus.APPROVED,
})

_TRANSITIONS: Dict[WorkflowAction, tuple[FrozenSet[Optional[ContentStatus]], ContentStatus]] = {
    WorkflowAction.SAVE_DRAFT: (_EDITABLE, ContentStatus.DRAFT),
    WorkflowAction.SUBMIT: (_EDITABLE, ContentStatus.PENDING),
    WorkflowAction.APPROVE: (_EDITABLE, ContentStatus.APPROVED),
    WorkflowAction.REQUEST_REVISION: (_EDITABLE, ContentStatus.REVISION_REQUESTED),
    WorkflowAction.MARK_FOR_REMOVAL: (_EDITABLE | {ContentStatus.REMOVAL_PENDING}, ContentStatus.REMOVAL_PENDING),
    WorkflowAction.RESTORE: (frozenset({ContentStatus.REMOVAL_PENDING}), ContentStatus.DRAFT),
}


@dataclass(frozen=True, slots=True)
class ReviewOutcome:
    status: ContentStatus
    note: Optional[RevisionNote]
    counts_as_revision: bool


class WorkflowPolicy:
    """Evaluates workflow transitions."""

    def next_status(self, action: WorkflowAction, current: Optional[ContentStatus]) -> ContentStatus:
        allowed_from, target = _TRANSITIONS[action]
        if current not in allowed_from:
            state = current.value if current else "NONE"
            raise PolicyViolationError(f"Transition '{action.value}' is not allowed from {state}.")
        return target

    def can(self, action: WorkflowAction, current: Optional[ContentStatus]) -> bool:
        return current in _TRANSITIONS[action][0]

    def allowed_actions(self, current: Optional[ContentStatus]) -> List[WorkflowAction]:
        return [a for a in WorkflowAction if self.can(a, current)]

    def review(
        self,
        decision: ReviewDecision,
        current: Optional[ContentStatus],
        reviewer: User,
        note: str = "",
    ) -> ReviewOutcome:
        """Target status plus the revision note to append (only for non-blank notes)."""
        decision = ReviewDecision(decision)
        action = (WorkflowAction.APPROVE if decision is ReviewDecision.APPROVE
                  else WorkflowAction.REQUEST_REVISION)
        status = self.next_status(action, current)
        text = (note or "").strip()
        revision_note = RevisionNote.create(reviewer.id, reviewer.name, text) if text else None
        return ReviewOutcome(
            status=status,
            note=revision_note,
            counts_as_revision=decision is ReviewDecision.REVISION,
        )


workflow_policy = WorkflowPolicy()
