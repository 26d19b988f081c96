"""Shared pytest fixtures: in-memory store, wired application, signed-in users.

The user fixtures depend on ``app`` because wiring re-binds the session.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from core.common.app_context import AppContext
from core.common.kv_store import InMemoryKeyValueStore
from core.config.bootstrap import Application, build_application
from core.config.config_service import ConfigService
from core.models.user import User, UserRole


@pytest.fixture(autouse=True)
def _reset_app_context():
    AppContext.reset()
    yield
    AppContext.reset()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def config(tmp_path: Path) -> ConfigService:
    cfg = ConfigService(user_ini=tmp_path / "absent.ini")
    cfg.storage.backend = "memory"
    cfg.security.bcrypt_rounds = 4
    cfg.workflow.simulate_latency = False
    return cfg


@pytest.fixture
def app(store: InMemoryKeyValueStore, config: ConfigService) -> Application:
    return build_application(store=store, config=config)


@pytest.fixture
def admin(app: Application) -> User:
    user = User(id="1", email="admin@cvsu.edu.ph", name="ADMIN", role=UserRole.ADMIN)
    AppContext.set_current_user(user)
    return user


@pytest.fixture
def faculty(app: Application) -> User:
    user = User(id="2", email="faculty@cvsu.edu.ph", name="PROFESSOR", role=UserRole.FACULTY)
    AppContext.set_current_user(user)
    return user


@pytest.fixture
def student(app: Application) -> User:
    user = User(id="s-100", email="juan.cruz@cvsu.edu.ph", name="Juan Cruz",
                role=UserRole.STUDENT, student_number="202110999", department="BS Psychology")
    AppContext.set_current_user(user)
    return user
