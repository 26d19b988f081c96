"""
core/settings/logic/settings_manager.py
=======================================

High-Level-API für Settings.

- Institution-wide settings (``global_system_settings``), editable with
  ``system_settings``.
- Colour theme of the portal (``mastery_theme``), stored as the full theme
  record; an unknown theme falls back to the first catalog entry.

Per-user preferences live on the user record (see ``UserManager``).
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Final, Optional

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from core.common.kv_store import KeyValueStore, StorageKeys
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import ValidationError
from core.logging.logic.activity_logger import ActivityLogger
from core.settings.models.global_settings import THEMES, GlobalSystemSettings, Theme

logger = logging.getLogger(__name__)


class SettingsManager:
    _lock: Final[RLock] = RLock()

    def __init__(
        self,
        store: KeyValueStore,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        latency: OperationLatency | None = None,
    ) -> None:
        self._store = store
        self._guard = guard
        self._activity = activity
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    #  Global settings                                                   #
    # ------------------------------------------------------------------ #
    def get_global_settings(self) -> GlobalSystemSettings:
        return GlobalSystemSettings.from_dict(self._store.get(StorageKeys.GLOBAL_SETTINGS))

    def can_manage_institutional(self) -> bool:
        return self._guard.has_permission(perm.SYSTEM_SETTINGS)

    def save_global_settings(self, settings: GlobalSystemSettings) -> GlobalSystemSettings:
        self._latency.pause("settings.save_global")
        self._guard.require_permission(perm.SYSTEM_SETTINGS)
        grade = settings.institutional_passing_grade
        if not 0 <= grade <= 100:
            raise ValidationError("Passing grade must be between 0 and 100.")
        if not (settings.institution_name or "").strip():
            raise ValidationError("Institution name is required.")

        with self._lock:
            self._store.set(StorageKeys.GLOBAL_SETTINGS, settings.to_dict())
        logger.info("Global settings saved (passing grade %d)", grade)
        self._activity.log("Modified Global Settings", "System Controls", "GLOBAL")
        return settings

    # ------------------------------------------------------------------ #
    #  Theme                                                             #
    # ------------------------------------------------------------------ #
    @staticmethod
    def find_theme(name: Optional[str]) -> Theme:
        return next((t for t in THEMES if t.name == name), THEMES[0])

    def get_theme(self) -> Theme:
        raw = self._store.get(StorageKeys.THEME)
        name = raw.get("name") if isinstance(raw, dict) else raw
        return self.find_theme(name)

    def set_theme(self, name: str) -> Theme:
        theme = self.find_theme(name)
        if theme.name != name:
            logger.warning("Unknown theme %r, using %s", name, theme.name)
        with self._lock:
            self._store.set(StorageKeys.THEME, theme.to_dict())
        return theme
