"""Sidebar navigation entries and the permission each one requires."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from access.models import permission as perm


@dataclass(frozen=True, slots=True)
class NavigationItem:
    id: str
    label: str
    required_permission: str


NAVIGATION_ITEMS: Tuple[NavigationItem, ...] = (
    NavigationItem("dashboard", "Dashboard", perm.VIEW_DASHBOARD),
    NavigationItem("subjects", "Institutional Repository", perm.MANAGE_CURRICULUM),
    NavigationItem("users", "User Management", perm.VIEW_USERS),
    NavigationItem("whitelist", "Whitelisting", perm.MANAGE_WHITELIST),
    NavigationItem("assessments", "Assessments", perm.CREATE_EXAMS),
    NavigationItem("analytics", "Analytics", perm.VIEW_ANALYTICS),
    NavigationItem("security", "Security & Logs", perm.SYSTEM_SETTINGS),
)
