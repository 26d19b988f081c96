"""
access/logic/access_guard.py
============================

Permission checks for service operations.

Permissions are resolved on every call from the stored role configs, so an
edit of the matrix applies to the next operation without re-login.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from access.logic.navigation_filter import filter_navigation
from access.logic.permission_resolver import resolve_permissions
from access.logic.role_config_repository import RoleConfigRepository
from access.models.navigation import NavigationItem
from core.exceptions.errors import PolicyViolationError
from core.models.user import User, UserRole

logger = logging.getLogger(__name__)


def _session_user() -> Optional[User]:
    from core.common.app_context import AppContext  # lazy
    return AppContext.get_current_user()


class AccessGuard:
    def __init__(
        self,
        role_repository: RoleConfigRepository,
        *,
        user_provider: Callable[[], Optional[User]] = _session_user,
    ) -> None:
        self._roles = role_repository
        self._user_provider = user_provider

    # ------------------------------------------------------------------ #
    def current_user(self) -> Optional[User]:
        return self._user_provider()

    def require_user(self) -> User:
        user = self._user_provider()
        if user is None:
            raise PolicyViolationError("No user is signed in.")
        return user

    def permissions_for(self, user: User) -> List[str]:
        return resolve_permissions(user.role, self._roles.load_saved())

    def has_permission(self, permission: str, user: Optional[User] = None) -> bool:
        actor = user or self._user_provider()
        return actor is not None and permission in self.permissions_for(actor)

    def require_permission(self, permission: str, user: Optional[User] = None) -> User:
        actor = user or self.require_user()
        if permission not in self.permissions_for(actor):
            logger.warning("Denied %s to user %s (%s)", permission, actor.id, actor.role.value)
            raise PolicyViolationError(f"Permission '{permission}' is required.")
        return actor

    def require_admin(self, user: Optional[User] = None) -> User:
        actor = user or self.require_user()
        if actor.role is not UserRole.ADMIN:
            logger.warning("Denied admin action to user %s (%s)", actor.id, actor.role.value)
            raise PolicyViolationError("Only administrators can perform this action.")
        return actor

    def visible_navigation(self, user: Optional[User] = None) -> List[NavigationItem]:
        actor = user or self.require_user()
        return filter_navigation(self.permissions_for(actor))
