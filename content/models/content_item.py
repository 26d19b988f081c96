"""Review material (module, reviewer or study guide)."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from workflow.enum.content_status import ContentStatus
from workflow.models.revision_note import RevisionNote


class ContentType(str, Enum):
    MODULE = "MODULE"
    REVIEWER = "REVIEWER"
    GUIDE = "GUIDE"


class ContentFormat(str, Enum):
    TEXT = "TEXT"
    PDF = "PDF"


@dataclass(slots=True)
class ContentItem:
    """
    ``subject_id`` is the authoritative subject reference; ``subject`` keeps
    the subject name for display and for records written before ids were used.
    """

    id: Optional[str]
    title: str
    subject: str = "General"
    subject_id: Optional[str] = None
    topic_id: str = "None"
    type: ContentType = ContentType.MODULE
    format: ContentFormat = ContentFormat.TEXT
    content: Optional[str] = None
    file_url: Optional[str] = None
    status: ContentStatus = ContentStatus.DRAFT
    author_id: str = ""
    author_name: str = ""
    submission_count: int = 0
    revision_count: int = 0
    date_created: Optional[str] = None
    last_updated: Optional[str] = None
    revision_notes: List[RevisionNote] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "subjectId": self.subject_id,
            "topicId": self.topic_id,
            "type": self.type.value,
            "format": self.format.value,
            "content": self.content,
            "fileUrl": self.file_url,
            "status": self.status.value,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "submissionCount": self.submission_count,
            "revisionCount": self.revision_count,
            "dateCreated": self.date_created,
            "lastUpdated": self.last_updated,
            "revisionNotes": [n.to_dict() for n in self.revision_notes],
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentItem":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            subject=data.get("subject") or "General",
            subject_id=data.get("subjectId"),
            topic_id=data.get("topicId") or "None",
            type=ContentType(data.get("type") or ContentType.MODULE.value),
            format=ContentFormat(data.get("format") or ContentFormat.TEXT.value),
            content=data.get("content"),
            file_url=data.get("fileUrl"),
            status=ContentStatus.parse(data.get("status")) or ContentStatus.DRAFT,
            author_id=str(data.get("authorId", "")),
            author_name=data.get("authorName", ""),
            submission_count=int(data.get("submissionCount") or 0),
            revision_count=int(data.get("revisionCount") or 0),
            date_created=data.get("dateCreated"),
            last_updated=data.get("lastUpdated"),
            revision_notes=[RevisionNote.from_dict(n) for n in data.get("revisionNotes") or []],
        )
