"""Lifecycle statuses shared by subjects, topics, content items and assessments."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ContentStatus(str, Enum):
    """Canonical workflow statuses. ``REMOVAL_PENDING`` is used by topics only."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    REVISION_REQUESTED = "REVISION_REQUESTED"
    APPROVED = "APPROVED"
    REMOVAL_PENDING = "REMOVAL_PENDING"

    @classmethod
    def parse(cls, value: "str | ContentStatus | None") -> Optional["ContentStatus"]:
        """None stays None (topics may carry no status); unknown strings raise."""
        if value is None or value == "":
            return None
        if isinstance(value, ContentStatus):
            return value
        return cls(str(value).strip().upper())
