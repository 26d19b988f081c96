"""
core/logging/logic/activity_logger.py
=====================================

Audit trail of user actions, stored under ``system_logs``.

Entries are prepended and the list is cut to the configured cap, so the
stored collection is always the most recent entries, newest first.
The actor is filled in from ``AppContext.current_user``; without a signed-in
user nothing is written.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from core.common.kv_store import KeyValueStore, StorageKeys
from core.helpers.date_time_helper import utc_now_iso
from core.helpers.id_generator import new_id
from core.logging.models.log_entry import ActivityLogEntry
from core.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_CAP = 200


def _session_user() -> Optional[User]:
    # Lazy import, um Zirkularität zu vermeiden
    from core.common.app_context import AppContext
    return AppContext.get_current_user()


class ActivityLogger:
    """Capped, newest-first activity log with auto-filled actor."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        cap: int = DEFAULT_CAP,
        user_provider: Callable[[], Optional[User]] = _session_user,
    ) -> None:
        if cap <= 0:
            raise ValueError("cap must be positive")
        self._store = store
        self._cap = cap
        self._user_provider = user_provider
        self._lock = threading.Lock()

    @property
    def cap(self) -> int:
        return self._cap

    # ------------------------------------------------------------------ #
    #  Öffentliche API: log                                              #
    # ------------------------------------------------------------------ #
    def log(
        self,
        action: str,
        entity_name: str,
        entity_id: Optional[str] = None,
        *,
        user: Optional[User] = None,
    ) -> Optional[ActivityLogEntry]:
        """
        Persists ``"<action>: <entity_name>"`` for the acting user.

        Returns the new entry, or None when no user is signed in.
        """
        actor = user or self._user_provider()
        if actor is None:
            logger.debug("activity '%s' not logged: no session user", action)
            return None

        entry = ActivityLogEntry(
            id=new_id("log"),
            user_id=actor.id,
            user_name=actor.name,
            action=f"{action}: {entity_name}",
            timestamp=utc_now_iso(),
            entity_id=entity_id,
        )
        with self._lock:
            current = self._store.get(StorageKeys.ACTIVITY_LOG) or []
            updated = [entry.as_dict(), *current][: self._cap]
            self._store.set(StorageKeys.ACTIVITY_LOG, updated)
        logger.info("activity %s by %s", entry.action, actor.id)
        return entry

    # ------------------------------------------------------------------ #
    #  Fetch / Clear                                                     #
    # ------------------------------------------------------------------ #
    def fetch_logs(self, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        raw = self._store.get(StorageKeys.ACTIVITY_LOG) or []
        entries = [ActivityLogEntry.from_dict(r) for r in raw]
        return entries if limit is None else entries[:limit]

    def clear_logs(self) -> None:
        with self._lock:
            self._store.remove(StorageKeys.ACTIVITY_LOG)
