"""Whitelist maintenance and mapped bulk import."""
from __future__ import annotations

import pytest

from core.common.app_context import AppContext
from core.exceptions.errors import ImportFormatError, PolicyViolationError, ValidationError
from whitelist.models.whitelist_entry import WhitelistStatus

MAPPING = {"name": "Full Name", "studentNumber": "Student No.", "email": "Email"}


def test_seed_entries_and_filters(app, admin) -> None:
    assert [e.name for e in app.whitelist.list_entries()] == [
        "Maria Santos", "James Wilson", "Liza Ramos", "Kevin Durant",
    ]
    assert len(app.whitelist.list_entries(status=WhitelistStatus.PENDING)) == 2
    assert [e.id for e in app.whitelist.list_entries("202110789")] == ["3"]
    assert [e.id for e in app.whitelist.list_entries("KEVIN.durant")] == ["4"]


def test_add_rejects_duplicate_student_number(app, admin) -> None:
    entry = app.whitelist.add_entry("Ana Reyes", "202210001", "ana.reyes@cvsu.edu.ph")
    assert entry.status is WhitelistStatus.PENDING
    with pytest.raises(ValidationError):
        app.whitelist.add_entry("Someone Else", "202210001")
    with pytest.raises(ValidationError):
        app.whitelist.add_entry("", "202210002")


def test_update_and_delete(app, admin) -> None:
    entry = app.whitelist.get_entry("2")
    entry.status = WhitelistStatus.REGISTERED
    app.whitelist.update_entry(entry)
    assert app.whitelist.get_entry("2").status is WhitelistStatus.REGISTERED

    entry.student_number = "202110123"
    with pytest.raises(ValidationError):
        app.whitelist.update_entry(entry)

    app.whitelist.delete_entry("2")
    assert len(app.whitelist.list_entries()) == 3


def test_bulk_import_skips_known_and_repeated_numbers(app, admin) -> None:
    rows = [
        {"Full Name": "Ana Reyes", "Student No.": "202210001", "Email": "ana@cvsu.edu.ph"},
        {"Full Name": "Maria Santos", "Student No.": "202110123", "Email": "maria@cvsu.edu.ph"},
        {"Full Name": "Ana Again", "Student No.": "202210001", "Email": ""},
        {"Full Name": "", "Student No.": "202210002", "Email": None},
    ]
    result = app.whitelist.bulk_import(rows, MAPPING)

    assert (result.added, result.skipped) == (2, 2)
    entries = app.whitelist.list_entries()
    numbers = [e.student_number for e in entries]
    assert len(numbers) == len(set(numbers))
    last = entries[-1]
    assert (last.name, last.email, last.status) == (
        "Unknown Student", "no-email@cvsu.edu.ph", WhitelistStatus.PENDING,
    )
    assert app.activity.fetch_logs()[0].action == "Bulk Imported Whitelist: 2 students"


def test_bulk_import_requires_complete_mapping(app, admin) -> None:
    with pytest.raises(ImportFormatError, match="Please map all required fields."):
        app.whitelist.bulk_import([], {"name": "Full Name", "studentNumber": "", "email": "Email"})


def test_faculty_cannot_manage_whitelist(app, faculty) -> None:
    with pytest.raises(PolicyViolationError):
        app.whitelist.add_entry("Ana Reyes", "202210001")
