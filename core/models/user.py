"""
user.py

Defines the central User model, user roles and account status for Mastery Hub.
All features use this model for users, permissions and user-specific data.
Stored JSON keeps the field names of the web client (``studentNumber``,
``lastLogin`` ...), so records stay interchangeable with exported backups.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    """
    Closed set of account roles. Role names coming from storage, forms or
    role configs are normalized once through ``parse``.
    """
    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"

    @classmethod
    def parse(cls, value: "str | UserRole") -> "UserRole":
        if isinstance(value, UserRole):
            return value
        key = str(value or "").strip().upper()
        if key not in cls.__members__:
            raise ValueError(f"Unknown role: {value!r}")
        return cls[key]

    @property
    def label(self) -> str:
        return self.value.title()


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


# Keys of the per-user preference bag
DEFAULT_PREFERENCES: Dict[str, bool] = {
    "compactSidebar": False,
    "notificationsEnabled": True,
    "emailAlerts": True,
}


class User:
    """
    Represents an account of the portal (admin, faculty member or student).
    This model is the single source of truth for user-related operations.
    """

    def __init__(
        self,
        id: str,
        email: str,
        name: str,
        role: UserRole = UserRole.STUDENT,
        status: UserStatus = UserStatus.ACTIVE,
        password_hash: Optional[str] = None,
        student_number: Optional[str] = None,
        department: Optional[str] = None,
        phone_number: Optional[str] = None,
        last_login: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        :param id: Unique string id ("1", "u-1712345678901", ...)
        :param email: Login email, unique case-insensitively
        :param name: Display name
        :param role: Assigned role (enum)
        :param status: Account status; only ACTIVE accounts may log in
        :param password_hash: bcrypt hash (never exposed in the session record)
        :param student_number: Student or faculty number
        :param department: Department / college
        :param phone_number: Optional contact number
        :param last_login: ISO timestamp of the last login or "Never"
        :param settings: Preference bag (compactSidebar, notificationsEnabled, emailAlerts)
        """
        self.id = str(id)
        self.email = email
        self.name = name
        self.role = UserRole.parse(role)
        self.status = UserStatus(status)
        self.password_hash = password_hash
        self.student_number = student_number
        self.department = department
        self.phone_number = phone_number
        self.last_login = last_login
        self.settings = dict(settings or {})

    def __str__(self):
        return (
            f"User({self.id}): {self.name} <{self.email}>, "
            f"Role: {self.role.value}, Status: {self.status.value}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.to_dict(include_secret=True) == other.to_dict(include_secret=True)

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def preferences(self) -> Dict[str, bool]:
        """Preference bag merged over the defaults."""
        merged = dict(DEFAULT_PREFERENCES)
        merged.update({k: bool(v) for k, v in self.settings.items() if k in DEFAULT_PREFERENCES})
        return merged

    # -------------------- Serialization ------------------------------ #
    def to_dict(self, *, include_secret: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "status": self.status.value,
            "studentNumber": self.student_number,
            "department": self.department,
            "phoneNumber": self.phone_number,
            "lastLogin": self.last_login,
            "settings": dict(self.settings),
        }
        if include_secret:
            data["passwordHash"] = self.password_hash
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        try:
            role = UserRole.parse(data.get("role", UserRole.STUDENT))
        except ValueError:
            role = UserRole.STUDENT
        return cls(
            id=str(data["id"]),
            email=data.get("email", ""),
            name=data.get("name", ""),
            role=role,
            status=UserStatus(data.get("status", UserStatus.ACTIVE.value)),
            password_hash=data.get("passwordHash"),
            student_number=data.get("studentNumber"),
            department=data.get("department"),
            phone_number=data.get("phoneNumber"),
            last_login=data.get("lastLogin"),
            settings=data.get("settings") or {},
        )
