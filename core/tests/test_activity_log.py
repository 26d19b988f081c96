"""Activity logger cap/ordering and the security log controller."""
from __future__ import annotations

import json

import pytest

from core.common.kv_store import InMemoryKeyValueStore, StorageKeys
from core.logging.logic.activity_logger import ActivityLogger
from core.logging.logic.log_controller import LogController
from core.models.user import User, UserRole

ADMIN = User(id="1", email="admin@cvsu.edu.ph", name="ADMIN", role=UserRole.ADMIN)
FACULTY = User(id="2", email="faculty@cvsu.edu.ph", name="PROFESSOR", role=UserRole.FACULTY)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


def test_entries_are_prepended_and_capped(kv) -> None:
    logger = ActivityLogger(kv, cap=3, user_provider=lambda: ADMIN)
    for n in range(5):
        logger.log("Created Subject Shell", f"Subject {n}", f"s-{n}")
    entries = logger.fetch_logs()
    assert [e.action for e in entries] == [
        "Created Subject Shell: Subject 4",
        "Created Subject Shell: Subject 3",
        "Created Subject Shell: Subject 2",
    ]
    assert entries[0].user_name == "ADMIN"
    assert len(kv.get(StorageKeys.ACTIVITY_LOG)) == 3


def test_nothing_is_written_without_session(kv) -> None:
    logger = ActivityLogger(kv, user_provider=lambda: None)
    assert logger.log("Logged In", "nobody") is None
    assert kv.get(StorageKeys.ACTIVITY_LOG) is None


def test_explicit_user_overrides_session(kv) -> None:
    logger = ActivityLogger(kv, user_provider=lambda: None)
    entry = logger.log("Logged Out", "PROFESSOR", "2", user=FACULTY)
    assert entry.user_id == "2"


def test_default_cap_is_two_hundred(kv) -> None:
    logger = ActivityLogger(kv, user_provider=lambda: ADMIN)
    for n in range(205):
        logger.log("Action", str(n))
    assert len(logger.fetch_logs()) == 200
    assert logger.fetch_logs(limit=1)[0].action == "Action: 204"


def test_controller_search_and_pagination(kv) -> None:
    logger = ActivityLogger(kv, user_provider=lambda: ADMIN)
    for n in range(20):
        logger.log("Approved Content", f"Item {n}")
    logger.log("Logged In", "PROFESSOR", user=FACULTY)
    controller = LogController(logger)

    assert len(controller.get_logs(query="professor")) == 1
    page = controller.get_page(2)
    assert (page.page, page.total_pages, len(page.items)) == (2, 2, 6)
    assert controller.get_page(99).page == 2
    assert controller.recent()[0].action == "Logged In: PROFESSOR"


def test_controller_sorting_and_export(kv, tmp_path) -> None:
    logger = ActivityLogger(kv, user_provider=lambda: ADMIN)
    logger.log("B action", "x")
    logger.log("A action", "y")
    controller = LogController(logger)
    controller.set_sorting("action", ascending=True)
    assert [e.action for e in controller.get_logs()] == ["A action: y", "B action: x"]

    target = tmp_path / "logs.json"
    assert controller.export_logs_to_json(target) == 2
    exported = json.loads(target.read_text(encoding="utf-8"))
    assert exported[0]["userName"] == "ADMIN"
    assert "timestampLocal" in exported[0]
