"""Summary figures for the dashboard landing page."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from content.logic.content_repository import ContentRepository
from core.logging.logic.activity_logger import ActivityLogger
from core.logging.models.log_entry import ActivityLogEntry
from core.models.user import UserRole
from curriculum.logic.subject_repository import SubjectRepository
from usermanagement.logic.user_repository import UserRepository
from workflow.enum.content_status import ContentStatus

RECENT_ACTIVITY_COUNT = 5


@dataclass(frozen=True)
class DashboardSummary:
    students: int
    pending_content: int
    total_materials: int
    subjects: int
    topic_units: int
    recent_activity: List[ActivityLogEntry] = field(default_factory=list)


class DashboardService:
    def __init__(
        self,
        users: UserRepository,
        content: ContentRepository,
        subjects: SubjectRepository,
        activity: ActivityLogger,
    ) -> None:
        self._users = users
        self._content = content
        self._subjects = subjects
        self._activity = activity

    def summary(self) -> DashboardSummary:
        items = self._content.load_all()
        subjects = self._subjects.load_all()
        return DashboardSummary(
            students=sum(1 for u in self._users.load_all() if u.role is UserRole.STUDENT),
            pending_content=sum(1 for i in items if i.status is ContentStatus.PENDING),
            total_materials=len(items),
            subjects=len(subjects),
            topic_units=sum(s.topic_count() for s in subjects),
            recent_activity=self._activity.fetch_logs(limit=RECENT_ACTIVITY_COUNT),
        )
