"""
backup/logic/backup_service.py
==============================

Whole-system export and restore of the persisted collections.

Export bundles the raw stored values of users, content, assessments,
subjects, whitelist and global settings with a format version and a
timestamp. Import validates the document before anything is written, then
overwrites the collections one by one. The writes are sequential, so a
storage failure part-way through leaves a mix of old and new collections.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from core.common.app_context import AppContext
from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import KeyValueStore, StorageKeys
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import BackupFormatError
from core.helpers.date_time_helper import date_stamp, utc_now_iso
from core.logging.logic.activity_logger import ActivityLogger
from core.models.user import User
from core.settings.models.global_settings import GlobalSystemSettings

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_VERSION = "1.2.1"

REQUIRED_KEYS: Tuple[str, ...] = ("users", "content", "assessments", "subjects", "whitelist")

# Document key -> storage key, in restore order
_SECTIONS: Tuple[Tuple[str, str], ...] = (
    ("users", StorageKeys.USERS),
    ("content", StorageKeys.CONTENT),
    ("assessments", StorageKeys.ASSESSMENTS),
    ("subjects", StorageKeys.SUBJECTS),
    ("whitelist", StorageKeys.WHITELIST),
    ("global_settings", StorageKeys.GLOBAL_SETTINGS),
)

SESSION_WARNING = "Active user not found in imported backup. Profile might be inconsistent."


@dataclass(frozen=True)
class ImportReport:
    session_rebound: bool
    warnings: List[str] = field(default_factory=list)


def backup_filename(day=None) -> str:
    return f"CVSU_Mastery_Backup_{date_stamp(day)}.json"


class BackupService:
    def __init__(
        self,
        store: KeyValueStore,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        collections: Mapping[str, JsonCollectionRepository],
        version: str = DEFAULT_BACKUP_VERSION,
        latency: OperationLatency | None = None,
    ) -> None:
        self._store = store
        self._guard = guard
        self._activity = activity
        self._collections = dict(collections)
        missing = [k for k in REQUIRED_KEYS if k not in self._collections]
        if missing:
            raise TypeError(f"BackupService needs repositories for: {', '.join(missing)}")
        self._version = version
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    #  Export                                                            #
    # ------------------------------------------------------------------ #
    def export(self) -> Dict[str, Any]:
        self._latency.pause("backup.export")
        self._guard.require_permission(perm.MANAGE_BACKUP)
        document: Dict[str, Any] = {name: self._store.get(key) for name, key in _SECTIONS}
        document["version"] = self._version
        document["timestamp"] = utc_now_iso()
        self._activity.log("System Backup", "Full Data Export", "SYSTEM")
        logger.info("Exported backup version %s", self._version)
        return document

    def export_to_file(self, directory: str | Path) -> Path:
        document = self.export()
        target = Path(directory) / backup_filename()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    # ------------------------------------------------------------------ #
    #  Import                                                            #
    # ------------------------------------------------------------------ #
    def import_backup(self, document: "Mapping[str, Any] | str | bytes") -> ImportReport:
        self._latency.pause("backup.import")
        self._guard.require_permission(perm.MANAGE_BACKUP)
        backup = self._parse(document)
        sections = self._validate(backup)

        for name, key in _SECTIONS:
            value = sections.get(name)
            if value is None:
                continue
            if name == "global_settings":
                self._store.set(key, value)
            else:
                self._collections[name].replace_raw(value)
            logger.info("Restored %s", key)

        rebound, warnings = self._rebind_session(sections.get("users"))
        self._activity.log("System Restore", "Institutional Data Import (Atomic)", "SYSTEM")
        return ImportReport(session_rebound=rebound, warnings=warnings)

    def import_from_file(self, path: str | Path) -> ImportReport:
        return self.import_backup(Path(path).read_text(encoding="utf-8"))

    # ------------------------------------------------------------------ #
    #  Interne Helfer                                                    #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _parse(document: "Mapping[str, Any] | str | bytes") -> Mapping[str, Any]:
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except json.JSONDecodeError as exc:
                logger.warning("Backup is not valid JSON: %s", exc)
                raise BackupFormatError("Failed to parse backup file.") from exc
        if not isinstance(document, Mapping):
            raise BackupFormatError("Failed to parse backup file.")
        return document

    def _validate(self, backup: Mapping[str, Any]) -> Dict[str, Any]:
        """Checks keys and decodes every record; nothing is written before this passes."""
        missing = tuple(k for k in REQUIRED_KEYS if k not in backup)
        if missing:
            raise BackupFormatError(
                f"Invalid backup format. Missing keys: {', '.join(missing)}", missing_keys=missing
            )

        sections: Dict[str, Any] = {}
        for name, _key in _SECTIONS:
            value = backup.get(name)
            # sections may be embedded as JSON text
            if isinstance(value, str):
                try:
                    value = json.loads(value)
                except json.JSONDecodeError as exc:
                    raise BackupFormatError(f"Section '{name}' is not valid JSON.") from exc
            expected = dict if name == "global_settings" else list
            if value is not None and not isinstance(value, expected):
                raise BackupFormatError(f"Section '{name}' has an unexpected shape.")
            if isinstance(value, list) and not all(isinstance(r, dict) and "id" in r for r in value):
                raise BackupFormatError(f"Section '{name}' contains records without an id.")
            if value is not None:
                self._decode(name, value)
            sections[name] = value
        return sections

    def _decode(self, name: str, value: Any) -> None:
        try:
            if name == "global_settings":
                GlobalSystemSettings.from_dict(value)
            else:
                self._collections[name].decode_all(value)
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning("Backup section %s holds an unreadable record: %s", name, exc)
            raise BackupFormatError(f"Section '{name}' contains an unreadable record: {exc}") from exc

    @staticmethod
    def _rebind_session(users: Optional[List[Dict[str, Any]]]) -> Tuple[bool, List[str]]:
        current = AppContext.get_current_user()
        if current is None or users is None:
            return False, []
        email = current.email.lower()
        match = next((u for u in users if str(u.get("email", "")).lower() == email), None)
        if match is None:
            logger.warning("Session user %s missing from restored users", current.id)
            return False, [SESSION_WARNING]
        record = {k: v for k, v in match.items() if k not in ("password", "passwordHash")}
        AppContext.set_current_user(User.from_dict(record), reason="backup_restore")
        return True, []
