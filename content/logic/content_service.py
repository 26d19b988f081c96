"""
content/logic/content_service.py
================================

Authoring and review of review materials.

SAVE stores a DRAFT, SUBMIT sends the item to PENDING and counts the
submission. Admin review approves or requests a revision (counted, with an
optional note). There is no cascade for content.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from content.logic.content_repository import ContentRepository
from content.models.content_item import ContentItem
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from core.helpers.date_time_helper import today_iso
from core.helpers.id_generator import new_id
from core.helpers.query_helper import matches_search
from core.logging.logic.activity_logger import ActivityLogger
from core.models.user import User, UserRole
from workflow.enum.content_status import ContentStatus
from workflow.services.policy.workflow_policy import (
    ReviewDecision,
    WorkflowAction,
    WorkflowPolicy,
    workflow_policy,
)

logger = logging.getLogger(__name__)


class SaveAction(str, Enum):
    SAVE = "SAVE"
    SUBMIT = "SUBMIT"


class RowAction(str, Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"


@dataclass(frozen=True, slots=True)
class ContentStats:
    total: int
    approved: int
    pending: int
    revision: int


class ContentService:
    def __init__(
        self,
        repository: ContentRepository,
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
    def list_items(self, query: Optional[str] = None) -> List[ContentItem]:
        return [i for i in self._repo.load_all()
                if matches_search(query, i.title, i.author_name)]

    def get_item(self, item_id: str) -> ContentItem:
        item = self._repo.get(item_id)
        if item is None:
            raise NotFoundError("Content", item_id)
        return item

    def stats(self, user: Optional[User] = None) -> ContentStats:
        """Counters over all items for admins, over the user's own items otherwise."""
        actor = user or self._guard.require_user()
        items = self._repo.load_all()
        if actor.role is not UserRole.ADMIN:
            items = [i for i in items if i.author_id == actor.id]
        return ContentStats(
            total=len(items),
            approved=sum(1 for i in items if i.status is ContentStatus.APPROVED),
            pending=sum(1 for i in items if i.status is ContentStatus.PENDING),
            revision=sum(1 for i in items if i.status is ContentStatus.REVISION_REQUESTED),
        )

    @staticmethod
    def row_action(item: ContentItem, user: User) -> RowAction:
        """Admins review, authors edit their own items, everyone else reads."""
        if user.role is UserRole.ADMIN:
            return RowAction.VIEW
        return RowAction.EDIT if item.author_id == user.id else RowAction.VIEW

    # ------------------------------------------------------------------ #
    #  Authoring                                                         #
    # ------------------------------------------------------------------ #
    def save_item(self, item: ContentItem, action: SaveAction = SaveAction.SAVE) -> ContentItem:
        self._latency.pause("content.save")
        author = self._guard.require_permission(
            perm.CREATE_CONTENT if item.id is None else perm.EDIT_CONTENT
        )
        if not (item.title or "").strip():
            raise ValidationError("Title is required.")

        if item.id is not None:
            stored = self.get_item(item.id)
            if stored.author_id and stored.author_id != author.id and author.role is not UserRole.ADMIN:
                raise PolicyViolationError("Only the author can edit this material.")

        action = SaveAction(action)
        workflow_action = WorkflowAction.SUBMIT if action is SaveAction.SUBMIT else WorkflowAction.SAVE_DRAFT
        today = today_iso()
        saved = dataclasses.replace(
            item,
            id=item.id or new_id("c"),
            status=self._policy.next_status(workflow_action, item.status),
            submission_count=item.submission_count + (1 if action is SaveAction.SUBMIT else 0),
            author_id=author.id,
            author_name=author.name,
            date_created=item.date_created or today,
            last_updated=today,
            revision_notes=list(item.revision_notes),
        )
        self._repo.upsert(saved)
        logger.info("Content %s saved as %s", saved.id, saved.status.value)
        self._activity.log(
            "Submitted Content" if action is SaveAction.SUBMIT else "Saved Content Draft",
            saved.title, saved.id,
        )
        return saved

    # ------------------------------------------------------------------ #
    #  Review                                                            #
    # ------------------------------------------------------------------ #
    def review_item(self, item_id: str, decision: ReviewDecision, note: str = "") -> ContentItem:
        self._latency.pause("content.review")
        admin = self._guard.require_admin()
        item = self.get_item(item_id)
        outcome = self._policy.review(decision, item.status, admin, note)
        notes = list(item.revision_notes)
        if outcome.note is not None:
            notes.append(outcome.note)
        updated = dataclasses.replace(
            item,
            status=outcome.status,
            revision_count=item.revision_count + (1 if outcome.counts_as_revision else 0),
            revision_notes=notes,
        )
        self._repo.upsert(updated)
        self._activity.log(
            "Approved Content" if outcome.status is ContentStatus.APPROVED else "Requested Content Revision",
            updated.title, updated.id,
        )
        return updated

    # ------------------------------------------------------------------ #
    #  Delete                                                            #
    # ------------------------------------------------------------------ #
    def delete_item(self, item_id: str) -> None:
        self._latency.pause("content.delete")
        actor = self._guard.require_user()
        item = self.get_item(item_id)
        if actor.role is not UserRole.ADMIN and item.author_id != actor.id:
            raise PolicyViolationError("Only the author or an administrator can delete this material.")
        self._repo.delete(item_id)
        self._activity.log("Deleted Content", item.title, item.id)
