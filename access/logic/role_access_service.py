"""
access/logic/role_access_service.py
===================================

Business logic of the role access matrix. Admin only.

Each operation works on the whole config list (stored list, or the default
matrix while nothing was saved yet) and writes it back.
"""
from __future__ import annotations

import logging
from typing import List

from access.logic.access_guard import AccessGuard
from access.logic.role_config_repository import RoleConfigRepository
from access.models.permission import find_module, find_permission
from access.models.role_config import RoleConfig
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from core.logging.logic.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class RoleAccessService:
    def __init__(
        self,
        repository: RoleConfigRepository,
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
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    def list_roles(self) -> List[RoleConfig]:
        return self._repo.load_all()

    def get_role(self, name: str) -> RoleConfig:
        return self._find(self._repo.load_all(), name)

    # ------------------------------------------------------------------ #
    #  Permission matrix                                                 #
    # ------------------------------------------------------------------ #
    def toggle_permission(self, role_name: str, permission_id: str) -> RoleConfig:
        self._latency.pause("roles.toggle")
        self._guard.require_admin()
        if find_permission(permission_id) is None:
            raise ValidationError(f"Unknown permission '{permission_id}'.")
        roles = self._repo.load_all()
        role = self._find(roles, role_name)
        if permission_id in role.permissions:
            role.permissions = [p for p in role.permissions if p != permission_id]
        else:
            role.permissions = [*role.permissions, permission_id]
        self._persist(roles, "Updated Role Configuration", role.name)
        return role

    def set_module_permissions(self, role_name: str, module_id: str, enabled: bool) -> RoleConfig:
        """Grant (or revoke) every action of one module."""
        self._latency.pause("roles.toggle_module")
        self._guard.require_admin()
        module = find_module(module_id)
        if module is None:
            raise ValidationError(f"Unknown permission module '{module_id}'.")
        actions = module.action_ids()
        roles = self._repo.load_all()
        role = self._find(roles, role_name)
        if enabled:
            role.permissions = [*role.permissions, *(a for a in actions if a not in role.permissions)]
        else:
            role.permissions = [p for p in role.permissions if p not in actions]
        self._persist(roles, "Updated Role Configuration", role.name)
        return role

    def save_roles(self, roles: List[RoleConfig]) -> None:
        self._latency.pause("roles.save")
        self._guard.require_admin()
        names = [r.key for r in roles]
        if len(names) != len(set(names)):
            raise ValidationError("Role names must be unique.")
        self._persist(roles, "Updated Role Configuration", "Role Matrix")

    # ------------------------------------------------------------------ #
    #  Role lifecycle                                                    #
    # ------------------------------------------------------------------ #
    def add_role(self, name: str) -> RoleConfig:
        self._latency.pause("roles.add")
        self._guard.require_admin()
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("Role name is required.")
        roles = self._repo.load_all()
        if any(r.key == clean.upper() for r in roles):
            raise ValidationError(f'Role "{clean}" already exists.')
        role = RoleConfig(name=clean, permissions=[], is_system=False)
        roles.append(role)
        self._persist(roles, "Created Role", clean)
        return role

    def rename_role(self, name: str, new_name: str) -> RoleConfig:
        self._latency.pause("roles.rename")
        self._guard.require_admin()
        clean = (new_name or "").strip()
        if not clean:
            raise ValidationError("Role name is required.")
        roles = self._repo.load_all()
        role = self._find(roles, name)
        if role.is_system:
            raise PolicyViolationError("System roles cannot be renamed.")
        if any(r is not role and r.key == clean.upper() for r in roles):
            raise ValidationError(f'Role "{clean}" already exists.')
        role.name = clean
        self._persist(roles, "Renamed Role", clean)
        return role

    def delete_role(self, name: str) -> None:
        self._latency.pause("roles.delete")
        self._guard.require_admin()
        roles = self._repo.load_all()
        role = self._find(roles, name)
        if role.is_system:
            raise PolicyViolationError("System roles cannot be deleted.")
        self._persist([r for r in roles if r is not role], "Deleted Role", role.name)

    # ------------------------------------------------------------------ #
    #  Interne Helfer                                                    #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _find(roles: List[RoleConfig], name: str) -> RoleConfig:
        key = (name or "").strip().upper()
        for role in roles:
            if role.key == key:
                return role
        raise NotFoundError("Role", name)

    def _persist(self, roles: List[RoleConfig], action: str, entity: str) -> None:
        self._repo.save_all(roles)
        logger.info("%s: %s", action, entity)
        self._activity.log(action, entity, "ROLES")
