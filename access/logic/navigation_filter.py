"""Sidebar filtering by permission. Re-run on every route change; nothing is cached."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from access.models.navigation import NAVIGATION_ITEMS, NavigationItem


def filter_navigation(
    permissions: Iterable[str],
    items: Sequence[NavigationItem] = NAVIGATION_ITEMS,
) -> List[NavigationItem]:
    """Entries whose required permission is granted, in their original order."""
    granted = set(permissions)
    return [item for item in items if item.required_permission in granted]
