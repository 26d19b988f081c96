"""
access/logic/permission_resolver.py
===================================

Maps a role to its effective permission list.

A stored role config whose name matches the role case-insensitively wins
verbatim, with no merging. Otherwise the built-in table applies; role names
outside the closed ``UserRole`` set fall through to the student set.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from access.models import permission as perm
from access.models.role_config import RoleConfig
from core.models.user import UserRole

logger = logging.getLogger(__name__)

FACULTY_DEFAULT_PERMISSIONS: Tuple[str, ...] = (
    perm.VIEW_DASHBOARD,
    perm.VIEW_SUBJECTS, perm.EDIT_SUBJECTS,
    perm.VIEW_CONTENT, perm.CREATE_CONTENT, perm.EDIT_CONTENT,
    perm.VIEW_ASSESSMENTS, perm.CREATE_ASSESSMENTS,
    perm.VIEW_ANALYTICS,
)

STUDENT_DEFAULT_PERMISSIONS: Tuple[str, ...] = (
    perm.VIEW_DASHBOARD,
    perm.VIEW_ANALYTICS,
)


def _default_table() -> Dict[UserRole, Tuple[str, ...]]:
    return {
        UserRole.ADMIN: tuple(perm.all_permission_ids()),
        UserRole.FACULTY: FACULTY_DEFAULT_PERMISSIONS,
        UserRole.STUDENT: STUDENT_DEFAULT_PERMISSIONS,
    }


def normalize_role_name(role: "str | UserRole") -> str:
    if isinstance(role, UserRole):
        return role.value
    return str(role or "").strip().upper()


def default_permissions(role: "str | UserRole") -> List[str]:
    """Built-in permissions for *role*; unknown names get the student set."""
    try:
        parsed = UserRole.parse(normalize_role_name(role))
    except ValueError:
        logger.debug("No built-in permissions for role %r, using student set", role)
        parsed = UserRole.STUDENT
    return list(_default_table()[parsed])


def find_role_config(role: "str | UserRole",
                     configs: Optional[Iterable[RoleConfig]]) -> Optional[RoleConfig]:
    key = normalize_role_name(role)
    return next((c for c in (configs or ()) if c.key == key), None)


def resolve_permissions(role: "str | UserRole",
                        configs: Optional[Iterable[RoleConfig]] = None) -> List[str]:
    """Effective, ordered permission ids of *role*."""
    config = find_role_config(role, configs)
    if config is not None:
        return list(config.permissions)
    return default_permissions(role)
