"""
log_entry.py

Dataclass for one activity log entry.

• from_dict()  – builds the object from a stored JSON dict
• as_dict()    – returns the stored shape; ``with_local_time=True`` adds
                 a ``timestampLocal`` display string for list views.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import core.helpers.date_time_helper as dt


@dataclass(frozen=True)
class ActivityLogEntry:
    id: str
    user_id: str
    user_name: str
    action: str                  # "<action>: <entity name>"
    timestamp: str               # ISO-UTC
    entity_id: Optional[str] = None

    # -------------------- Factory ------------------------------------ #
    @classmethod
    def from_dict(cls, data: dict) -> "ActivityLogEntry":
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("userId", "")),
            user_name=data.get("userName", ""),
            action=data.get("action", ""),
            timestamp=data.get("timestamp", ""),
            entity_id=data.get("entityId"),
        )

    # -------------------- Dict for storage / export ------------------- #
    def as_dict(self, *, with_local_time: bool = False) -> dict:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "userName": self.user_name,
            "action": self.action,
            "timestamp": self.timestamp,
        }
        if self.entity_id is not None:
            data["entityId"] = self.entity_id
        if with_local_time and self.timestamp:
            data["timestampLocal"] = dt.utc_to_local_str(self.timestamp)
        return data
