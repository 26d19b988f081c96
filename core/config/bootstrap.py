# core/config/bootstrap.py
"""
Application wiring.

``build_application`` creates one store (or takes the given one), builds
every repository and service against it, binds ``AppContext`` and registers
the services under their feature names.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from access.logic.access_guard import AccessGuard
from access.logic.role_access_service import RoleAccessService
from access.logic.role_config_repository import RoleConfigRepository
from assessments.logic.assessment_repository import AssessmentRepository
from assessments.logic.assessment_service import AssessmentService
from backup.logic.backup_service import BackupService
from content.logic.content_repository import ContentRepository
from content.logic.content_service import ContentService
from core.common.app_context import AppContext
from core.common.kv_store import InMemoryKeyValueStore, KeyValueStore, SQLiteKeyValueStore
from core.common.latency import NoLatency, OperationLatency, SimulatedLatency
from core.config.config_service import ConfigService, config_service
from core.logging.logic.activity_logger import ActivityLogger
from core.logging.logic.log_controller import LogController
from core.settings.logic.settings_manager import SettingsManager
from curriculum.logic.subject_repository import SubjectRepository
from curriculum.logic.subject_service import SubjectService
from dashboard.logic.dashboard_service import DashboardService
from usermanagement.logic.user_manager import UserManager
from usermanagement.logic.user_repository import UserRepository
from whitelist.logic.spreadsheet_reader import SpreadsheetReader
from whitelist.logic.whitelist_repository import WhitelistRepository
from whitelist.logic.whitelist_service import WhitelistService

logger = logging.getLogger(__name__)


@dataclass
class Application:
    store: KeyValueStore
    config: ConfigService
    activity: ActivityLogger
    guard: AccessGuard
    users: UserManager
    roles: RoleAccessService
    subjects: SubjectService
    content: ContentService
    assessments: AssessmentService
    whitelist: WhitelistService
    spreadsheets: SpreadsheetReader
    settings: SettingsManager
    backup: BackupService
    logs: LogController
    dashboard: DashboardService


def configure_logging(config: ConfigService | None = None) -> None:
    cfg = config or config_service
    level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=cfg.logging.format)


def create_store(config: ConfigService) -> KeyValueStore:
    backend = config.storage.backend.strip().lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "sqlite":
        return SQLiteKeyValueStore(config.storage.sqlite_path)
    raise ValueError(f"Unknown storage backend: {config.storage.backend!r}")


def create_latency(config: ConfigService) -> OperationLatency:
    if config.workflow.simulate_latency:
        return SimulatedLatency(config.workflow.latency_ms)
    return NoLatency()


def build_application(
    store: KeyValueStore | None = None,
    config: ConfigService | None = None,
    latency: OperationLatency | None = None,
) -> Application:
    cfg = config or config_service
    store = store if store is not None else create_store(cfg)
    latency = latency or create_latency(cfg)

    activity = ActivityLogger(store, cap=cfg.logging.activity_log_cap)
    role_repo = RoleConfigRepository(store)
    guard = AccessGuard(role_repo)
    user_repo = UserRepository(store, bcrypt_rounds=cfg.security.bcrypt_rounds)
    subject_repo = SubjectRepository(store)
    content_repo = ContentRepository(store)
    assessment_repo = AssessmentRepository(store)
    whitelist_repo = WhitelistRepository(store)

    app = Application(
        store=store,
        config=cfg,
        activity=activity,
        guard=guard,
        users=UserManager(user_repo, guard, activity, latency=latency),
        roles=RoleAccessService(role_repo, guard, activity, latency=latency),
        subjects=SubjectService(subject_repo, guard, activity, latency=latency),
        content=ContentService(content_repo, guard, activity, latency=latency),
        assessments=AssessmentService(assessment_repo, subject_repo, guard, activity, latency=latency),
        whitelist=WhitelistService(whitelist_repo, guard, activity, latency=latency),
        spreadsheets=SpreadsheetReader(),
        settings=SettingsManager(store, guard, activity, latency=latency),
        backup=BackupService(
            store, guard, activity,
            collections={
                "users": user_repo,
                "content": content_repo,
                "assessments": assessment_repo,
                "subjects": subject_repo,
                "whitelist": whitelist_repo,
            },
            version=cfg.general.backup_version,
            latency=latency,
        ),
        logs=LogController(activity, page_size=cfg.logging.security_page_size),
        dashboard=DashboardService(user_repo, content_repo, subject_repo, activity),
    )

    AppContext.bind_store(store)
    for name in ("activity", "guard", "users", "roles", "subjects", "content", "assessments",
                 "whitelist", "spreadsheets", "settings", "backup", "logs", "dashboard"):
        AppContext.register_service(name, getattr(app, name))
    logger.info("%s wired against %s", cfg.general.app_name, type(store).__name__)
    return app
