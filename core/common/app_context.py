# core/common/app_context.py
"""
Global runtime context, session store & service registry for Mastery Hub.

IMPORTANT ARCHITECTURE RULE:
- AppContext is the SINGLE owner of the signed-in user.
- The session is mirrored to the bound key/value store under ``mastery_user``
  (password hash stripped) and restored by ``bind_store``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.common.kv_store import KeyValueStore, StorageKeys
from core.common.session_events import SessionObserver, UserSessionEvent
from core.models.user import User

logger = logging.getLogger(__name__)


class AppContext:
    """Central runtime context (no GUI state)."""

    store: Optional[KeyValueStore] = None
    current_user: Optional[User] = None

    # ---------- Service registry for DI -------------------------------
    services: dict[str, object] = {}

    _observers: list[SessionObserver] = []

    # ---------- Store binding -----------------------------------------
    @classmethod
    def bind_store(cls, store: Optional[KeyValueStore]) -> Optional[User]:
        """Attach the persistence port and restore a persisted session."""
        cls.store = store
        cls.current_user = None
        if store is None:
            return None
        raw = store.get(StorageKeys.SESSION_USER)
        if raw:
            try:
                cls.current_user = User.from_dict(raw)
            except (KeyError, ValueError, TypeError):
                logger.warning("Discarding unreadable session record: %r", raw)
                store.remove(StorageKeys.SESSION_USER)
        return cls.current_user

    # ---------- Session API -------------------------------------------
    @classmethod
    def get_current_user(cls) -> Optional[User]:
        return cls.current_user

    @classmethod
    def set_current_user(cls, user: User, *, reason: str = "login") -> None:
        old = cls.current_user
        cls.current_user = user
        if cls.store is not None:
            cls.store.set(StorageKeys.SESSION_USER, user.to_dict())
        cls._emit("login" if old is None else "user_changed", old, user, reason)

    @classmethod
    def clear_current_user(cls, *, reason: str = "logout") -> None:
        old = cls.current_user
        cls.current_user = None
        if cls.store is not None:
            cls.store.remove(StorageKeys.SESSION_USER)
        if old is not None:
            cls._emit("logout", old, None, reason)

    # ---------- Observers ---------------------------------------------
    @classmethod
    def subscribe_user_session(cls, callback: SessionObserver) -> None:
        if callback not in cls._observers:
            cls._observers.append(callback)

    @classmethod
    def unsubscribe_user_session(cls, callback: SessionObserver) -> None:
        if callback in cls._observers:
            cls._observers.remove(callback)

    @classmethod
    def _emit(cls, type_, old: Optional[User], new: Optional[User], reason: str) -> None:
        event = UserSessionEvent(
            type=type_,
            old_user=old,
            new_user=new,
            reason=reason,
            ts_utc=datetime.now(timezone.utc),
        )
        for callback in list(cls._observers):
            try:
                callback(event)
            except Exception:  # noqa: BLE001 - one observer must not block the others
                logger.exception("Session observer %r failed", callback)

    # ---------- Dynamic registration ---------------------------------
    @classmethod
    def register_service(cls, name: str, instance: object) -> None:
        cls.services[name] = instance

    @classmethod
    def get_service(cls, name: str) -> Any:
        try:
            return cls.services[name]
        except KeyError:
            raise KeyError(f"Service '{name}' is not registered") from None

    @classmethod
    def reset(cls) -> None:
        """Forget store, session, services and observers."""
        cls.store = None
        cls.current_user = None
        cls.services = {}
        cls._observers = []
