"""Pre-registration allow-list entry."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class WhitelistStatus(str, Enum):
    REGISTERED = "REGISTERED"
    PENDING = "PENDING"


@dataclass(slots=True)
class WhitelistEntry:
    id: str
    name: str
    student_number: str
    email: str
    status: WhitelistStatus = WhitelistStatus.PENDING
    date_added: str = ""
    approved_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "studentNumber": self.student_number,
            "email": self.email,
            "status": self.status.value,
            "dateAdded": self.date_added,
        }
        if self.approved_by:
            data["approvedBy"] = self.approved_by
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WhitelistEntry":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            student_number=str(data.get("studentNumber", "")),
            email=data.get("email", ""),
            status=WhitelistStatus(data.get("status") or WhitelistStatus.PENDING.value),
            date_added=data.get("dateAdded", ""),
            approved_by=data.get("approvedBy"),
        )
