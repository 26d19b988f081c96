"""
core/tests/test_app_context_session.py

Unit tests for the AppContext session API, its persistence under
``mastery_user`` and the observer mechanism.
Uses unittest like the rest of the core tests.
"""

from __future__ import annotations

import unittest

from core.common.app_context import AppContext
from core.common.kv_store import InMemoryKeyValueStore, StorageKeys
from core.common.session_events import UserSessionEvent
from core.models.user import User, UserRole


class TestAppContextSession(unittest.TestCase):
    def setUp(self) -> None:
        AppContext.reset()
        self.store = InMemoryKeyValueStore()
        AppContext.bind_store(self.store)
        self._events: list[UserSessionEvent] = []

        def _cb(ev: UserSessionEvent) -> None:
            self._events.append(ev)

        self._cb = _cb
        AppContext.subscribe_user_session(self._cb)

    def tearDown(self) -> None:
        AppContext.unsubscribe_user_session(self._cb)
        AppContext.reset()

    def test_login_event_emitted(self) -> None:
        u = User(id="1", email="alice@cvsu.edu.ph", name="Alice", role=UserRole.ADMIN)
        AppContext.set_current_user(u, reason="login")
        self.assertIs(AppContext.get_current_user(), u)
        ev = self._events[-1]
        self.assertEqual(ev.type, "login")
        self.assertIsNone(ev.old_user)
        self.assertEqual(ev.new_user.name, "Alice")
        self.assertEqual(ev.user_id, "1")

    def test_second_set_is_user_changed(self) -> None:
        AppContext.set_current_user(User(id="1", email="a@x", name="A"))
        AppContext.set_current_user(User(id="2", email="b@x", name="B"), reason="restore")
        ev = self._events[-1]
        self.assertEqual(ev.type, "user_changed")
        self.assertEqual(ev.old_user.id, "1")
        self.assertEqual(ev.reason, "restore")

    def test_logout_event_emitted(self) -> None:
        u = User(id="2", email="bob@cvsu.edu.ph", name="Bob")
        AppContext.set_current_user(u, reason="login")
        AppContext.clear_current_user(reason="logout")
        self.assertIsNone(AppContext.get_current_user())
        ev = self._events[-1]
        self.assertEqual(ev.type, "logout")
        self.assertIsNotNone(ev.old_user)
        self.assertIsNone(ev.new_user)

    def test_clear_without_session_emits_nothing(self) -> None:
        AppContext.clear_current_user(reason="noop")
        self.assertEqual(self._events, [])

    def test_unsubscribe_stops_events(self) -> None:
        AppContext.unsubscribe_user_session(self._cb)
        u = User(id="3", email="carol@cvsu.edu.ph", name="Carol")
        AppContext.set_current_user(u, reason="login")
        self.assertEqual(self._events, [])

    def test_failing_observer_does_not_block_others(self) -> None:
        def _boom(ev: UserSessionEvent) -> None:
            raise RuntimeError("observer failure")

        AppContext.unsubscribe_user_session(self._cb)
        AppContext.subscribe_user_session(_boom)
        AppContext.subscribe_user_session(self._cb)
        with self.assertLogs("core.common.app_context", level="ERROR"):
            AppContext.set_current_user(User(id="4", email="d@x", name="D"))
        self.assertEqual(len(self._events), 1)

    def test_session_is_persisted_without_password_hash(self) -> None:
        u = User(id="5", email="e@x", name="E", password_hash="$2b$04$secret")
        AppContext.set_current_user(u)
        stored = self.store.get(StorageKeys.SESSION_USER)
        self.assertEqual(stored["id"], "5")
        self.assertNotIn("passwordHash", stored)

    def test_bind_store_restores_session(self) -> None:
        AppContext.set_current_user(User(id="6", email="f@x", name="F", role=UserRole.FACULTY))
        AppContext.reset()
        restored = AppContext.bind_store(self.store)
        self.assertIsNotNone(restored)
        self.assertEqual(restored.role, UserRole.FACULTY)

    def test_bind_store_discards_corrupt_record(self) -> None:
        self.store.set(StorageKeys.SESSION_USER, {"name": "no id"})
        AppContext.reset()
        with self.assertLogs("core.common.app_context", level="WARNING"):
            self.assertIsNone(AppContext.bind_store(self.store))
        self.assertIsNone(self.store.get(StorageKeys.SESSION_USER))

    def test_service_registry(self) -> None:
        AppContext.register_service("marker", object)
        self.assertIs(AppContext.get_service("marker"), object)
        with self.assertRaises(KeyError):
            AppContext.get_service("missing")


if __name__ == "__main__":
    unittest.main()
