"""Static permission catalog, grouped into modules for the role matrix.

Every permission id referenced by navigation, role defaults or service
guards is declared here exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# --------------------------------------------------------------------------- #
#  Permission ids
# --------------------------------------------------------------------------- #
VIEW_DASHBOARD = "view_dashboard"

MANAGE_CURRICULUM = "manage_curriculum"
VIEW_SUBJECTS = "view_subjects"
EDIT_SUBJECTS = "edit_subjects"
DELETE_SUBJECTS = "delete_subjects"

MANAGE_CONTENT = "manage_content"
VIEW_CONTENT = "view_content"
CREATE_CONTENT = "create_content"
EDIT_CONTENT = "edit_content"
DELETE_CONTENT = "delete_content"

CREATE_EXAMS = "create_exams"
VIEW_ASSESSMENTS = "view_assessments"
CREATE_ASSESSMENTS = "create_assessments"
EDIT_ASSESSMENTS = "edit_assessments"
DELETE_ASSESSMENTS = "delete_assessments"

VIEW_USERS = "view_users"
EDIT_USERS = "edit_users"

MANAGE_WHITELIST = "manage_whitelist"

VIEW_ANALYTICS = "view_analytics"
VIEW_STUDENT_ANALYTICS = "view_student_analytics"

SYSTEM_SETTINGS = "system_settings"
MANAGE_BACKUP = "manage_backup"


@dataclass(frozen=True, slots=True)
class Permission:
    id: str
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class PermissionModule:
    id: str
    name: str
    description: str
    actions: Tuple[Permission, ...]

    def action_ids(self) -> List[str]:
        return [a.id for a in self.actions]


PERMISSION_MODULES: Tuple[PermissionModule, ...] = (
    PermissionModule("dashboard", "Dashboard", "Overview statistics and recent activity", (
        Permission(VIEW_DASHBOARD, "View Dashboard", "Access to the main overview and stats"),
    )),
    PermissionModule("curriculum", "Curriculum", "Psychology core subjects and topic trees", (
        Permission(MANAGE_CURRICULUM, "Manage Curriculum", "Can access the psychology core repository and edit topic trees"),
        Permission(VIEW_SUBJECTS, "View Subjects", "Can browse subjects and their topics"),
        Permission(EDIT_SUBJECTS, "Edit Subjects", "Can create subjects and edit topic trees"),
        Permission(DELETE_SUBJECTS, "Delete Subjects", "Can remove subjects from the repository"),
    )),
    PermissionModule("content", "Content Materials", "Modules, reviewers and study guides", (
        Permission(MANAGE_CONTENT, "Manage Content", "Can create and edit review materials"),
        Permission(VIEW_CONTENT, "View Content", "Can read review materials"),
        Permission(CREATE_CONTENT, "Create Content", "Can draft new review materials"),
        Permission(EDIT_CONTENT, "Edit Content", "Can edit and resubmit review materials"),
        Permission(DELETE_CONTENT, "Delete Content", "Can delete review materials"),
    )),
    PermissionModule("assessments", "Assessments", "Pre-assessments, quizzes and post-assessments", (
        Permission(CREATE_EXAMS, "Create Exams", "Can create and schedule assessments"),
        Permission(VIEW_ASSESSMENTS, "View Assessments", "Can open assessments and their questions"),
        Permission(CREATE_ASSESSMENTS, "Create Assessments", "Can draft new assessments"),
        Permission(EDIT_ASSESSMENTS, "Edit Assessments", "Can edit questions and schedules"),
        Permission(DELETE_ASSESSMENTS, "Delete Assessments", "Can delete assessments"),
    )),
    PermissionModule("users", "User Management", "Accounts of admins, faculty and students", (
        Permission(VIEW_USERS, "View Users", "Can view list of all users"),
        Permission(EDIT_USERS, "Edit Users", "Can modify user details and status"),
    )),
    PermissionModule("whitelist", "Whitelisting", "Pre-registration allow-list of students", (
        Permission(MANAGE_WHITELIST, "Manage Whitelist", "Can approve and upload whitelist entries"),
    )),
    PermissionModule("analytics", "Analytics", "Performance reports", (
        Permission(VIEW_ANALYTICS, "View Analytics", "Can access student performance reports"),
        Permission(VIEW_STUDENT_ANALYTICS, "View Student Analytics", "Can drill into individual student results"),
    )),
    PermissionModule("system", "System", "Institutional controls, security logs and backups", (
        Permission(SYSTEM_SETTINGS, "System Settings", "Can modify institutional thresholds and theme"),
        Permission(MANAGE_BACKUP, "Manage System Backups", "Can export and import full system institutional data JSON files"),
    )),
)


def all_permission_ids() -> List[str]:
    """Every action id of the catalog, in module order."""
    return [a.id for m in PERMISSION_MODULES for a in m.actions]


_BY_ID: Dict[str, Permission] = {a.id: a for m in PERMISSION_MODULES for a in m.actions}


def find_permission(permission_id: str) -> Optional[Permission]:
    return _BY_ID.get(permission_id)


def find_module(module_id: str) -> Optional[PermissionModule]:
    return next((m for m in PERMISSION_MODULES if m.id == module_id), None)
