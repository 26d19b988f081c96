"""Curriculum subject (psychology core subject) with its topic tree."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from curriculum.models.topic_tree import TopicTree
from workflow.enum.content_status import ContentStatus
from workflow.models.revision_note import RevisionNote

_KNOWN_KEYS = {
    "id", "name", "description", "color", "topics", "status",
    "authorName", "lastUpdated", "revisionNotes",
}


@dataclass(slots=True)
class Subject:
    id: Optional[str]                      # None until first save
    name: str
    description: str = ""
    color: str = "#1e40af"
    topics: TopicTree = field(default_factory=TopicTree)
    status: Optional[ContentStatus] = None
    author_name: Optional[str] = None
    last_updated: Optional[str] = None
    revision_notes: List[RevisionNote] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_fully_approved(self) -> bool:
        """Own status APPROVED and every topic in the tree APPROVED."""
        return self.status is ContentStatus.APPROVED and self.topics.all_approved()

    def topic_count(self) -> int:
        return len(self.topics)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "topics": self.topics.to_nested(),
        })
        optional = {
            "status": self.status.value if self.status else None,
            "authorName": self.author_name,
            "lastUpdated": self.last_updated,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        data["revisionNotes"] = [n.to_dict() for n in self.revision_notes]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subject":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description") or "",
            color=data.get("color") or "#1e40af",
            topics=TopicTree.from_nested(data.get("topics")),
            status=ContentStatus.parse(data.get("status")),
            author_name=data.get("authorName"),
            last_updated=data.get("lastUpdated"),
            revision_notes=[RevisionNote.from_dict(n) for n in data.get("revisionNotes") or []],
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
