"""Login, account administration, passwords, profile and preferences."""
from __future__ import annotations

import pytest

from core.common.app_context import AppContext
from core.common.kv_store import StorageKeys
from core.exceptions.errors import NotFoundError, PolicyViolationError, ValidationError
from core.models.user import UserRole, UserStatus


def test_default_accounts_are_seeded_with_hashes(app) -> None:
    users = app.users.get_all_users()
    assert [(u.id, u.email, u.role) for u in users] == [
        ("1", "admin@cvsu.edu.ph", UserRole.ADMIN),
        ("2", "faculty@cvsu.edu.ph", UserRole.FACULTY),
    ]
    raw = app.store.get(StorageKeys.USERS)
    assert all(r["passwordHash"].startswith("$2") and "password" not in r for r in raw)


def test_login_is_case_insensitive_and_stamps_last_login(app) -> None:
    user = app.users.login("ADMIN@cvsu.edu.ph", "password123")
    assert AppContext.get_current_user().id == user.id
    assert user.last_login != "Never"
    session = app.store.get(StorageKeys.SESSION_USER)
    assert "passwordHash" not in session
    assert app.activity.fetch_logs()[0].action == "Logged In: ADMIN"


def test_login_rejects_bad_credentials_and_inactive_accounts(app, admin) -> None:
    with pytest.raises(ValidationError, match="Invalid email or password."):
        app.users.login("admin@cvsu.edu.ph", "wrong")
    app.users.toggle_status("2")
    with pytest.raises(PolicyViolationError, match="inactive"):
        app.users.login("faculty@cvsu.edu.ph", "password123")


def test_logout_logs_then_clears(app) -> None:
    app.users.login("faculty@cvsu.edu.ph", "password123")
    app.users.logout()
    assert AppContext.get_current_user() is None
    assert app.store.get(StorageKeys.SESSION_USER) is None
    assert app.activity.fetch_logs()[0].action == "Logged Out: PROFESSOR"


def test_create_user_validation(app, admin) -> None:
    with pytest.raises(ValidationError, match="required fields"):
        app.users.create_user("", "x@cvsu.edu.ph", "secret1")
    with pytest.raises(ValidationError, match="Student Number"):
        app.users.create_user("Ana Reyes", "ana@cvsu.edu.ph", "secret1", UserRole.STUDENT)
    with pytest.raises(ValidationError, match="already exists"):
        app.users.create_user("Dup", "Faculty@cvsu.edu.ph", "secret1", UserRole.ADMIN)

    user = app.users.create_user("Ana Reyes", "ana@cvsu.edu.ph", "secret1", "student",
                                 student_number="202210001", department="BS Psychology")
    assert user.status is UserStatus.ACTIVE
    assert user.last_login == "Never"
    assert app.users.search_users(role=UserRole.STUDENT)[0].email == "ana@cvsu.edu.ph"
    assert [u.id for u in app.users.search_users("reyes")] == [user.id]


def test_admin_accounts_drop_student_fields(app, admin) -> None:
    user = app.users.create_user("Second Admin", "root@cvsu.edu.ph", "secret1", UserRole.ADMIN,
                                 student_number="123", department="IT")
    assert user.student_number is None and user.department is None


def test_faculty_cannot_create_users(app, faculty) -> None:
    with pytest.raises(PolicyViolationError):
        app.users.create_user("Ana", "ana@cvsu.edu.ph", "secret1", UserRole.ADMIN)


def test_toggle_and_delete(app, admin) -> None:
    assert app.users.toggle_status("2").status is UserStatus.INACTIVE
    assert app.users.toggle_status("2").status is UserStatus.ACTIVE
    assert app.activity.fetch_logs()[0].action == "Activated User: PROFESSOR"

    with pytest.raises(PolicyViolationError):
        app.users.delete_user("1")
    app.users.delete_user("2")
    with pytest.raises(NotFoundError):
        app.users.get_user("2")


def test_toggling_signed_in_user_refreshes_session(app, admin) -> None:
    events = []
    AppContext.subscribe_user_session(events.append)
    app.users.toggle_status("1")

    assert AppContext.get_current_user().status is UserStatus.INACTIVE
    assert app.store.get(StorageKeys.SESSION_USER)["status"] == "INACTIVE"
    assert events[-1].reason == "status_changed"

    app.users.toggle_status("2")
    assert AppContext.get_current_user().id == "1"
    assert len(events) == 1


def test_change_own_password(app) -> None:
    user = app.users.login("faculty@cvsu.edu.ph", "password123")
    with pytest.raises(ValidationError, match="incorrect"):
        app.users.change_password(user.id, "newsecret", "nope")
    with pytest.raises(ValidationError, match="at least 6"):
        app.users.change_password(user.id, "short", "password123")

    app.users.change_password(user.id, "newsecret", "password123")
    app.users.logout()
    assert app.users.login("faculty@cvsu.edu.ph", "newsecret").id == user.id


def test_admin_resets_other_password(app, admin) -> None:
    app.users.change_password("2", "resetpw")
    assert app.users.login("faculty@cvsu.edu.ph", "resetpw").id == "2"


def test_profile_update_refreshes_session(app) -> None:
    user = app.users.login("faculty@cvsu.edu.ph", "password123")
    updated = app.users.update_profile(user.id, name="Prof. Dela Cruz", department="Psychology")
    assert updated.name == "Prof. Dela Cruz"
    assert AppContext.get_current_user().name == "Prof. Dela Cruz"
    with pytest.raises(ValidationError):
        app.users.update_profile(user.id, email="new@cvsu.edu.ph")


def test_preferences_are_merged_and_logged(app) -> None:
    app.users.login("faculty@cvsu.edu.ph", "password123")
    user = app.users.save_preferences({"compactSidebar": True})
    assert user.preferences() == {
        "compactSidebar": True, "notificationsEnabled": True, "emailAlerts": True,
    }
    assert app.activity.fetch_logs()[0].action == "Updated Settings: User Preferences"
    with pytest.raises(ValidationError):
        app.users.save_preferences({"darkMode": True})


def test_legacy_plaintext_passwords_are_migrated(app, store) -> None:
    store.set(StorageKeys.USERS, [
        {"id": "9", "name": "Legacy", "email": "legacy@cvsu.edu.ph", "password": "oldpass",
         "role": "STUDENT", "status": "ACTIVE"},
    ])
    assert app.users.login("legacy@cvsu.edu.ph", "oldpass").id == "9"
    raw = store.get(StorageKeys.USERS)[0]
    assert "password" not in raw and raw["passwordHash"].startswith("$2")
