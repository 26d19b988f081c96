"""Models of the access feature: permission catalog, role configs, navigation."""

from access.models.navigation import NAVIGATION_ITEMS, NavigationItem
from access.models.permission import (
    PERMISSION_MODULES,
    Permission,
    PermissionModule,
    all_permission_ids,
    find_module,
    find_permission,
)
from access.models.role_config import RoleConfig

__all__ = [
    "NAVIGATION_ITEMS",
    "NavigationItem",
    "PERMISSION_MODULES",
    "Permission",
    "PermissionModule",
    "RoleConfig",
    "all_permission_ids",
    "find_module",
    "find_permission",
]
