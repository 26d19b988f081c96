"""
core/common/session_events.py

Event objects for changes of the signed-in Mastery Hub user.

AppContext owns the session and publishes one event per change; the user
manager and backup restore are the usual producers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Literal, Optional

from core.models.user import User


SessionEventType = Literal["login", "logout", "user_changed"]


@dataclass(frozen=True, slots=True)
class UserSessionEvent:
    """One session transition (old -> new) with the reason given by the caller."""

    type: SessionEventType
    old_user: Optional[User]
    new_user: Optional[User]
    reason: str
    ts_utc: datetime

    @property
    def user_id(self) -> Optional[str]:
        user = self.new_user or self.old_user
        return user.id if user else None


SessionObserver = Callable[[UserSessionEvent], None]
