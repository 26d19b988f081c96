"""Backup export and restore."""
from __future__ import annotations

import json

import pytest

from backup.logic.backup_service import SESSION_WARNING, backup_filename
from core.common.app_context import AppContext
from core.common.kv_store import StorageKeys
from core.exceptions.errors import BackupFormatError, PolicyViolationError


def _document(**overrides):
    document = {
        "users": [{"id": "1", "name": "ADMIN (restored)", "email": "admin@cvsu.edu.ph",
                   "role": "ADMIN", "status": "ACTIVE", "password": "password123"}],
        "content": [{"id": "c-1", "title": "Reviewer", "status": "APPROVED"}],
        "assessments": [],
        "subjects": [{"id": "s-9", "name": "Social Psychology", "topics": []}],
        "whitelist": [],
        "global_settings": {"institutionalPassingGrade": 70},
        "version": "1.2.1",
        "timestamp": "2024-03-12T08:00:00.000Z",
    }
    document.update(overrides)
    return document


def test_export_bundles_collections(app, admin) -> None:
    app.whitelist.list_entries()
    app.users.get_all_users()
    document = app.backup.export()
    assert set(document) == {"users", "content", "assessments", "subjects", "whitelist",
                             "global_settings", "version", "timestamp"}
    assert document["version"] == "1.2.1"
    assert document["content"] is None
    assert [u["id"] for u in document["users"]] == ["1", "2"]
    assert app.activity.fetch_logs()[0].action.startswith("System Backup")


def test_export_to_file(app, admin, tmp_path) -> None:
    path = app.backup.export_to_file(tmp_path)
    assert path.name == backup_filename()
    assert path.name.startswith("CVSU_Mastery_Backup_")
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == "1.2.1"


def test_import_restores_and_rebinds_session(app, admin) -> None:
    report = app.backup.import_backup(json.dumps(_document()))
    assert report.session_rebound and report.warnings == []
    assert AppContext.get_current_user().name == "ADMIN (restored)"
    assert [s.id for s in app.subjects.list_subjects()] == ["s-9"]
    assert app.settings.get_global_settings().institutional_passing_grade == 70
    assert app.users.login("admin@cvsu.edu.ph", "password123").id == "1"
    assert any(e.action == "System Restore: Institutional Data Import (Atomic)"
               for e in app.activity.fetch_logs())


def test_missing_keys_reject_before_writing(app, admin) -> None:
    document = _document()
    del document["whitelist"], document["subjects"]
    with pytest.raises(BackupFormatError) as info:
        app.backup.import_backup(document)
    assert str(info.value) == "Invalid backup format. Missing keys: subjects, whitelist"
    assert info.value.missing_keys == ("subjects", "whitelist")
    assert app.store.get(StorageKeys.CONTENT) is None


def test_malformed_json_is_rejected(app, admin) -> None:
    with pytest.raises(BackupFormatError):
        app.backup.import_backup("{not json")


def test_null_sections_are_skipped(app, admin) -> None:
    app.store.set(StorageKeys.WHITELIST, [{"id": "1", "name": "Kept", "studentNumber": "1",
                                          "email": "", "status": "PENDING", "dateAdded": ""}])
    app.backup.import_backup(_document(whitelist=None, global_settings=None))
    assert app.store.get(StorageKeys.WHITELIST)[0]["name"] == "Kept"


def test_unknown_session_user_gives_warning(app, admin) -> None:
    users = [{"id": "5", "name": "Other", "email": "other@cvsu.edu.ph", "role": "ADMIN"}]
    report = app.backup.import_backup(_document(users=users))
    assert not report.session_rebound
    assert report.warnings == [SESSION_WARNING]


def test_backup_requires_permission(app, faculty) -> None:
    with pytest.raises(PolicyViolationError):
        app.backup.export()
    with pytest.raises(PolicyViolationError):
        app.backup.import_backup(_document())


@pytest.mark.parametrize("section, records", [
    ("subjects", [{"id": "s-9", "name": "X", "status": "ARCHIVED", "topics": []}]),
    ("subjects", [{"id": "s-9", "name": "X", "topics": [{"id": "t-1", "title": "T", "status": "GONE"}]}]),
    ("content", [{"id": "c-2", "title": "Reviewer", "format": "VIDEO"}]),
    ("assessments", [{"id": "as-1", "title": "Quiz", "type": "FINAL_EXAM"}]),
    ("users", [{"id": "9", "email": "x@cvsu.edu.ph", "status": "BANNED"}]),
])
def test_undecodable_records_reject_before_writing(app, admin, section, records) -> None:
    with pytest.raises(BackupFormatError, match=f"Section '{section}' contains an unreadable record"):
        app.backup.import_backup(_document(**{section: records}))

    assert app.store.get(StorageKeys.CONTENT) is None
    assert app.store.get(StorageKeys.SUBJECTS) is None
    assert len(app.subjects.list_subjects()) == 4
    assert app.dashboard.summary().subjects == 4


def test_restore_goes_through_repositories(app, admin) -> None:
    app.backup.import_backup(_document())
    stored = app.store.get(StorageKeys.CONTENT)
    assert stored[0]["id"] == "c-1"
    assert stored[0]["status"] == "APPROVED"
    assert stored[0]["subject"] == "General"
    app.users.get_all_users()
    assert "password" not in app.store.get(StorageKeys.USERS)[0]
