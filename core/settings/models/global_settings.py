"""Institution-wide settings record and the colour themes of the portal."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List


@dataclass(slots=True)
class GlobalSystemSettings:
    institutional_passing_grade: int = 75
    require_content_approval: bool = True
    maintenance_mode: bool = False
    allow_public_registration: bool = False
    institution_name: str = "Cavite State University - Bacoor"
    academic_year: str = "2023-2024"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "institutionalPassingGrade": self.institutional_passing_grade,
            "requireContentApproval": self.require_content_approval,
            "maintenanceMode": self.maintenance_mode,
            "allowPublicRegistration": self.allow_public_registration,
            "institutionName": self.institution_name,
            "academicYear": self.academic_year,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "GlobalSystemSettings":
        data = data or {}
        defaults = cls()
        return cls(
            institutional_passing_grade=int(data.get("institutionalPassingGrade", defaults.institutional_passing_grade)),
            require_content_approval=bool(data.get("requireContentApproval", defaults.require_content_approval)),
            maintenance_mode=bool(data.get("maintenanceMode", defaults.maintenance_mode)),
            allow_public_registration=bool(data.get("allowPublicRegistration", defaults.allow_public_registration)),
            institution_name=str(data.get("institutionName", defaults.institution_name)),
            academic_year=str(data.get("academicYear", defaults.academic_year)),
        )


@dataclass(frozen=True, slots=True)
class Theme:
    name: str
    primary: str
    text: str
    border: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


THEMES: List[Theme] = [
    Theme("CVSU Standard", "bg-blue-800", "text-blue-800", "border-blue-800"),
    Theme("Forest Green", "bg-green-800", "text-green-800", "border-green-800"),
    Theme("Modern Dark", "bg-slate-900", "text-slate-900", "border-slate-900"),
    Theme("Midnight Purple", "bg-indigo-900", "text-indigo-900", "border-indigo-900"),
]
