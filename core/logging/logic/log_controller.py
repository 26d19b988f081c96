"""
log_controller.py

Business logic for the security log view: search, null-safe sorting,
pagination and JSON export over the activity log.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.helpers.query_helper import Page, matches_search, paginate
from core.logging.logic.activity_logger import ActivityLogger
from core.logging.models.log_entry import ActivityLogEntry

SECURITY_PAGE_SIZE = 15


class LogController:
    """High-level business logic for activity logs."""

    def __init__(self, activity_logger: ActivityLogger, *, page_size: int = SECURITY_PAGE_SIZE) -> None:
        self._activity = activity_logger
        self.page_size = page_size

        # Filter-/Sortier-State
        self.filter_query: Optional[str] = None
        self._sort_column = "timestamp"
        self._sort_ascending = False

    # ------------------------------------------------------------------ #
    # Öffentliche API                                                    #
    # ------------------------------------------------------------------ #
    def set_sorting(self, column: str, ascending: bool) -> None:
        self._sort_column = column
        self._sort_ascending = ascending

    def get_logs(self, *, query: Optional[str] = None) -> List[ActivityLogEntry]:
        """Entries whose user name or action contains *query*, sorted."""
        self.filter_query = query
        entries = [
            e for e in self._activity.fetch_logs()
            if matches_search(query, e.user_name, e.action)
        ]

        # --- Null-sichere Sortierung -----------------------------------
        def _safe_key(entry: ActivityLogEntry):
            val = getattr(entry, self._sort_column, "")
            return val if val is not None else ""

        return sorted(entries, key=_safe_key, reverse=not self._sort_ascending)

    def get_page(self, page: int = 1, *, query: Optional[str] = None) -> Page[ActivityLogEntry]:
        return paginate(self.get_logs(query=query), page, self.page_size)

    def recent(self, limit: int = 5) -> List[ActivityLogEntry]:
        return self._activity.fetch_logs(limit)

    # ------------------------------------------------------------------ #
    # Export                                                             #
    # ------------------------------------------------------------------ #
    def export_logs_to_json(self, file_path: str | Path, *, query: Optional[str] = None) -> int:
        logs: List[Dict[str, Any]] = [
            e.as_dict(with_local_time=True) for e in self.get_logs(query=query)
        ]
        with open(file_path, "w", encoding="utf-8") as fh:
            json.dump(logs, fh, indent=4, ensure_ascii=False)
        return len(logs)
