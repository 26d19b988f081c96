"""Role configuration record edited in the role access matrix."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class RoleConfig:
    """
    Permission set of one named role.

    ``is_system`` marks the built-in Admin / Faculty / Student roles, which
    cannot be renamed or deleted.
    """

    name: str
    permissions: List[str] = field(default_factory=list)
    is_system: bool = False

    @property
    def key(self) -> str:
        return self.name.strip().upper()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "permissions": list(self.permissions),
            "isSystem": self.is_system,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoleConfig":
        return cls(
            name=str(data.get("name") or data.get("role") or ""),
            permissions=[str(p) for p in data.get("permissions", [])],
            is_system=bool(data.get("isSystem", False)),
        )
