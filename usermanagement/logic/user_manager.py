"""
user_manager.py

Business-Logic: Login/Logout, User-CRUD, Profil-, Passwort- und
Präferenz-Änderungen.
*Alle* Audit-Events werden **hier** geloggt, niemals in Aufrufern.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from core.common.app_context import AppContext
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from core.helpers.date_time_helper import utc_now_iso
from core.helpers.id_generator import new_id
from core.helpers.query_helper import matches_search
from core.logging.logic.activity_logger import ActivityLogger
from core.models.user import DEFAULT_PREFERENCES, User, UserRole, UserStatus
from usermanagement.logic.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# Profile fields an edit may touch; email is the login key and stays fixed
EDITABLE_FIELDS = ("name", "department", "phone_number", "student_number")


class UserManager:
    """Verwaltet Benutzer-Sitzung und -Operationen."""

    # ------------------------------------------------------------------ #
    # Konstruktion                                                       #
    # ------------------------------------------------------------------ #
    def __init__(
        self,
        repository: UserRepository,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        latency: OperationLatency | None = None,
    ) -> None:
        self._repo = repository
        self._guard = guard
        self._activity = activity
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    # Session-Handling                                                   #
    # ------------------------------------------------------------------ #
    def login(self, email: str, password: str) -> User:
        """
        Prüft Credentials, stempelt ``last_login`` und setzt
        AppContext.current_user (persistiert unter ``mastery_user``).
        """
        self._latency.pause("user.login")
        user = self._repo.verify_login(email, password or "")
        if user is None:
            logger.warning("Login failed for %s", email)
            raise ValidationError("Invalid email or password.")
        if not user.is_active:
            logger.warning("Login refused for inactive account %s", user.id)
            raise PolicyViolationError("Account is inactive. Please contact the administrator.")

        user.last_login = utc_now_iso()
        self._repo.upsert(user)
        AppContext.set_current_user(user, reason="login")
        logger.info("User %s logged in", user.id)
        self._activity.log("Logged In", user.name, user.id)
        return user

    def logout(self) -> None:
        """Loggt den Logout *bevor* die Sitzung gelöscht wird."""
        user = AppContext.get_current_user()
        if user is not None:
            self._activity.log("Logged Out", user.name, user.id)
            logger.info("User %s logged out", user.id)
        AppContext.clear_current_user(reason="logout")

    def get_logged_in_user(self) -> Optional[User]:
        return AppContext.get_current_user()

    # ------------------------------------------------------------------ #
    # Query-Helper                                                       #
    # ------------------------------------------------------------------ #
    def get_user(self, user_id: str) -> User:
        user = self._repo.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_all_users(self) -> List[User]:
        return self._repo.load_all()

    def search_users(self, query: Optional[str] = None,
                     role: "UserRole | str | None" = None) -> List[User]:
        wanted = UserRole.parse(role) if role else None
        return [
            u for u in self._repo.load_all()
            if matches_search(query, u.name, u.email) and (wanted is None or u.role is wanted)
        ]

    # ------------------------------------------------------------------ #
    # Registrierung / Erstellung                                         #
    # ------------------------------------------------------------------ #
    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: "UserRole | str" = UserRole.STUDENT,
        *,
        student_number: Optional[str] = None,
        department: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> User:
        self._latency.pause("user.create")
        self._guard.require_permission(perm.EDIT_USERS)
        role = UserRole.parse(role)
        name, email = (name or "").strip(), (email or "").strip()
        student_number = (student_number or "").strip() or None
        department = (department or "").strip() or None

        if not name or not email or not password:
            raise ValidationError("Please fill in all required fields.")
        if role is UserRole.STUDENT and not (student_number and department):
            raise ValidationError("Student Number and Program are required for students.")
        if role is UserRole.FACULTY and not (student_number and department):
            raise ValidationError("Faculty ID and Department are required for faculty.")
        if self._repo.find_by_email(email) is not None:
            raise ValidationError(f"An account with email {email} already exists.")

        user = User(
            id=new_id("u"),
            email=email,
            name=name,
            role=role,
            status=UserStatus.ACTIVE,
            password_hash=self._repo.hash_password(password),
            student_number=student_number if role is not UserRole.ADMIN else None,
            department=department if role is not UserRole.ADMIN else None,
            phone_number=phone_number,
            last_login="Never",
        )
        self._repo.upsert(user)
        logger.info("Created user %s (%s)", user.id, role.value)
        self._activity.log("Created User Account", user.name, user.id)
        return user

    # ------------------------------------------------------------------ #
    # Status / Delete                                                    #
    # ------------------------------------------------------------------ #
    def toggle_status(self, user_id: str) -> User:
        self._latency.pause("user.toggle_status")
        self._guard.require_permission(perm.EDIT_USERS)
        user = self.get_user(user_id)
        user.status = UserStatus.INACTIVE if user.is_active else UserStatus.ACTIVE
        self._repo.upsert(user)
        self._refresh_session(user, reason="status_changed")
        self._activity.log("Activated User" if user.is_active else "Deactivated User",
                           user.name, user.id)
        return user

    def delete_user(self, user_id: str) -> None:
        self._latency.pause("user.delete")
        actor = self._guard.require_permission(perm.EDIT_USERS)
        if actor.id == user_id:
            raise PolicyViolationError("You cannot delete your own account.")
        user = self.get_user(user_id)
        self._repo.delete(user_id)
        logger.info("Deleted user %s", user_id)
        self._activity.log("Deleted User Account", user.name, user.id)

    # ------------------------------------------------------------------ #
    # Passwort / Profil                                                  #
    # ------------------------------------------------------------------ #
    def change_password(self, user_id: str, new_password: str,
                        current_password: Optional[str] = None) -> None:
        """
        Own account: *current_password* must verify. Another account:
        requires ``edit_users`` and no current password (admin reset).
        """
        self._latency.pause("user.change_password")
        actor = self._guard.require_user()
        user = self.get_user(user_id)
        if actor.id == user.id:
            if not self._repo.check_password(user, current_password or ""):
                raise ValidationError("Current password is incorrect.")
        else:
            self._guard.require_permission(perm.EDIT_USERS, actor)
        if len(new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

        user.password_hash = self._repo.hash_password(new_password)
        self._repo.upsert(user)
        self._activity.log("Changed Password", user.name, user.id)

    def update_profile(self, user_id: str, **changes: Optional[str]) -> User:
        self._latency.pause("user.update_profile")
        actor = self._guard.require_user()
        if actor.id != user_id:
            self._guard.require_permission(perm.EDIT_USERS, actor)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        user = self.get_user(user_id)
        for key, value in changes.items():
            setattr(user, key, value.strip() if isinstance(value, str) else value)
        if not (user.name or "").strip():
            raise ValidationError("Name is required.")

        self._repo.upsert(user)
        self._refresh_session(user)
        self._activity.log("Updated User Profile", user.name, user.id)
        return user

    # ------------------------------------------------------------------ #
    # Präferenzen                                                        #
    # ------------------------------------------------------------------ #
    def save_preferences(self, preferences: Dict[str, bool]) -> User:
        self._latency.pause("user.preferences")
        actor = self._guard.require_user()
        unknown = set(preferences) - set(DEFAULT_PREFERENCES)
        if unknown:
            raise ValidationError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        user = self.get_user(actor.id)
        user.settings = {**user.preferences(), **{k: bool(v) for k, v in preferences.items()}}
        self._repo.upsert(user)
        self._refresh_session(user)
        self._activity.log("Updated Settings", "User Preferences", user.id)
        return user

    # ------------------------------------------------------------------ #
    # Interne Helfer                                                     #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _refresh_session(user: User, *, reason: str = "profile_updated") -> None:
        current = AppContext.get_current_user()
        if current is not None and current.id == user.id:
            AppContext.set_current_user(user, reason=reason)
