"""
core/common/kv_store.py
=======================

Key/value persistence port used by every repository.

Values are JSON-compatible Python objects. Each stored key holds one whole
collection or record; writes always replace the complete value.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Final, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
#  Storage keys                                                      #
# ------------------------------------------------------------------ #
class StorageKeys:
    SESSION_USER: Final = "mastery_user"
    THEME: Final = "mastery_theme"
    USERS: Final = "registered_users"
    ROLE_CONFIGS: Final = "role_configs"
    SUBJECTS: Final = "psychology_core_subjects"
    CONTENT: Final = "system_content"
    ASSESSMENTS: Final = "system_assessments"
    WHITELIST: Final = "whitelist_entries"
    GLOBAL_SETTINGS: Final = "global_system_settings"
    ACTIVITY_LOG: Final = "system_logs"


def _to_json(v: Any) -> str:
    return json.dumps(v, ensure_ascii=False)


def _from_json(txt: str) -> Any:
    return json.loads(txt)


@runtime_checkable
class KeyValueStore(Protocol):
    """Port for the process-wide key/value storage."""

    def get(self, key: str) -> Any | None:
        """Return the stored value or None when the key is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under *key*."""
        ...

    def remove(self, key: str) -> None:
        """Drop *key*; absent keys are ignored."""
        ...


# ------------------------------------------------------------------ #
#  In-memory store                                                   #
# ------------------------------------------------------------------ #
class InMemoryKeyValueStore:
    """Dict-backed store; values are copied through JSON on every access."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._lock = RLock()
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        with self._lock:
            raw = self._data.get(key)
        return _from_json(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        raw = _to_json(value)
        with self._lock:
            self._data[key] = raw

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


# ------------------------------------------------------------------ #
#  SQLite store                                                      #
# ------------------------------------------------------------------ #
class SQLiteKeyValueStore:
    """JSON values in a single ``kv_store`` table."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None
        self._lock = RLock()
        self._ensure_schema()

    # ------------------------- Connection ---------------------------- #
    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None

    # ------------------------- öffentliche API ----------------------- #
    def get(self, key: str) -> Any | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT value FROM kv_store WHERE key=?", (key,)
            ).fetchone()
        return _from_json(row["value"]) if row else None

    def set(self, key: str, value: Any) -> None:
        raw = _to_json(value)
        with self._lock, self.conn:
            self.conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (key, raw),
            )
        logger.debug("kv_store set %s (%d bytes)", key, len(raw))

    def remove(self, key: str) -> None:
        with self._lock, self.conn:
            self.conn.execute("DELETE FROM kv_store WHERE key=?", (key,))

    def keys(self) -> list[str]:
        with self._lock:
            rows = self.conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]

    # ------------------------- Schema -------------------------------- #
    def _ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store(
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            self.conn.commit()
