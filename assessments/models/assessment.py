"""Assessments (pre-assessment, quiz, post-assessment) and their MCQ items."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from workflow.enum.content_status import ContentStatus
from workflow.models.revision_note import RevisionNote

OPTION_COUNT = 4
DEFAULT_TIME_LIMIT = 30


class AssessmentType(str, Enum):
    PRE_ASSESSMENT = "PRE_ASSESSMENT"
    QUIZ = "QUIZ"
    POST_ASSESSMENT = "POST_ASSESSMENT"

    @property
    def label(self) -> str:
        return {
            AssessmentType.PRE_ASSESSMENT: "Pre-Assessment",
            AssessmentType.QUIZ: "Quiz",
            AssessmentType.POST_ASSESSMENT: "Post-Assessment",
        }[self]


class ScheduleType(str, Enum):
    FLEXIBLE = "FLEXIBLE"
    SYNCED = "SYNCED"


@dataclass(slots=True)
class MCQQuestion:
    id: str
    text: str = ""
    options: List[str] = field(default_factory=lambda: [""] * OPTION_COUNT)
    correct_answer: int = 0        # zero-based index into options
    points: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MCQQuestion":
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            options=list(data.get("options") or [""] * OPTION_COUNT),
            correct_answer=int(data.get("correctAnswer") or 0),
            points=int(data.get("points", 1)),
        )


@dataclass(slots=True)
class Assessment:
    """
    ``subject_id`` is the authoritative subject reference; ``subject`` caches
    the name (older records may hold an id there, uniqueness checks accept both).
    """

    id: Optional[str]
    title: str
    type: AssessmentType = AssessmentType.PRE_ASSESSMENT
    subject: str = ""
    subject_id: Optional[str] = None
    topic_id: Optional[str] = None
    content_id: Optional[str] = None
    items: int = 0
    time_limit: int = DEFAULT_TIME_LIMIT
    status: ContentStatus = ContentStatus.DRAFT
    schedule_type: ScheduleType = ScheduleType.FLEXIBLE
    schedule_date: Optional[str] = None
    author_id: str = ""
    author_name: str = ""
    questions: List[MCQQuestion] = field(default_factory=list)
    date_created: Optional[str] = None
    last_updated: Optional[str] = None
    revision_notes: List[RevisionNote] = field(default_factory=list)

    def subject_refs(self) -> set[str]:
        """Every non-empty form under which this assessment names its subject."""
        return {r for r in (self.subject, self.subject_id) if r}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "subject": self.subject,
            "subjectId": self.subject_id,
            "topicId": self.topic_id,
            "contentId": self.content_id,
            "items": self.items,
            "timeLimit": self.time_limit,
            "status": self.status.value,
            "scheduleType": self.schedule_type.value,
            "scheduleDate": self.schedule_date,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "questions": [q.to_dict() for q in self.questions],
            "dateCreated": self.date_created,
            "lastUpdated": self.last_updated,
            "revisionNotes": [n.to_dict() for n in self.revision_notes],
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assessment":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            type=AssessmentType(data.get("type") or AssessmentType.PRE_ASSESSMENT.value),
            subject=data.get("subject") or "",
            subject_id=data.get("subjectId"),
            topic_id=data.get("topicId"),
            content_id=data.get("contentId"),
            items=int(data.get("items") or 0),
            time_limit=int(data.get("timeLimit") or DEFAULT_TIME_LIMIT),
            status=ContentStatus.parse(data.get("status")) or ContentStatus.DRAFT,
            schedule_type=ScheduleType(data.get("scheduleType") or ScheduleType.FLEXIBLE.value),
            schedule_date=data.get("scheduleDate"),
            author_id=str(data.get("authorId", "")),
            author_name=data.get("authorName", ""),
            questions=[MCQQuestion.from_dict(q) for q in data.get("questions") or []],
            date_created=data.get("dateCreated"),
            last_updated=data.get("lastUpdated"),
            revision_notes=[RevisionNote.from_dict(n) for n in data.get("revisionNotes") or []],
        )
