"""Reviewer feedback attached to subjects, content items and assessments."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from core.helpers.date_time_helper import utc_now_iso
from core.helpers.id_generator import new_id


@dataclass(frozen=True, slots=True)
class RevisionNote:
    id: str
    admin_id: str
    admin_name: str
    note: str
    timestamp: str

    @classmethod
    def create(cls, admin_id: str, admin_name: str, note: str) -> "RevisionNote":
        return cls(
            id=new_id("rn"),
            admin_id=admin_id,
            admin_name=admin_name,
            note=note,
            timestamp=utc_now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "adminId": self.admin_id,
            "adminName": self.admin_name,
            "note": self.note,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RevisionNote":
        return cls(
            id=str(data.get("id", "")),
            admin_id=str(data.get("adminId", "")),
            admin_name=data.get("adminName", ""),
            note=data.get("note", ""),
            timestamp=data.get("timestamp", ""),
        )
