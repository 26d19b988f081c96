"""Domain exceptions shared by all Mastery Hub features.

Every failure in this system is soft: services validate before they write,
so raising one of these leaves persisted state and caller drafts untouched.
"""
from __future__ import annotations


class MasteryHubError(Exception):
    """Base exception for all Mastery Hub features."""


class ValidationError(MasteryHubError):
    """Raised when a required field is missing or a workflow rule blocks a save."""


class PolicyViolationError(MasteryHubError):
    """Raised when the actor lacks a permission or touches a protected entity."""


class NotFoundError(MasteryHubError):
    """Raised when an id is not present in its collection."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id


class BackupFormatError(MasteryHubError):
    """Raised for malformed or incomplete backup documents."""

    def __init__(self, message: str, missing_keys: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing_keys = missing_keys


class ImportFormatError(MasteryHubError):
    """Raised when a spreadsheet cannot be read or its column mapping is incomplete."""
