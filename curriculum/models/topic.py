"""Topic node of a subject's curriculum tree (structure lives in TopicTree)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from workflow.enum.content_status import ContentStatus
from workflow.models.revision_note import RevisionNote

# Stored keys handled explicitly; everything else survives in ``extra``
_KNOWN_KEYS = {
    "id", "title", "description", "format", "fileUrl", "fileName", "status",
    "authorId", "authorName", "revisionNotes", "lastUpdated", "subTopics",
}


@dataclass(slots=True)
class Topic:
    id: str
    title: str
    description: str = ""
    format: Optional[str] = None          # "TEXT" | "PDF"
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    status: Optional[ContentStatus] = None
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    revision_notes: List[RevisionNote] = field(default_factory=list)
    last_updated: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_approved(self) -> bool:
        return self.status is ContentStatus.APPROVED

    @property
    def is_removal_pending(self) -> bool:
        return self.status is ContentStatus.REMOVAL_PENDING

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update({
            "id": self.id,
            "title": self.title,
            "description": self.description,
        })
        optional = {
            "format": self.format,
            "fileUrl": self.file_url,
            "fileName": self.file_name,
            "status": self.status.value if self.status else None,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "lastUpdated": self.last_updated,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.revision_notes:
            data["revisionNotes"] = [n.to_dict() for n in self.revision_notes]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description") or "",
            format=data.get("format"),
            file_url=data.get("fileUrl"),
            file_name=data.get("fileName"),
            status=ContentStatus.parse(data.get("status")),
            author_id=data.get("authorId"),
            author_name=data.get("authorName"),
            revision_notes=[RevisionNote.from_dict(n) for n in data.get("revisionNotes") or []],
            last_updated=data.get("lastUpdated"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
