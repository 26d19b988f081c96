"""
whitelist/logic/whitelist_service.py
====================================

Pre-registration allow-list maintenance and bulk spreadsheet import.

Student numbers are unique across the collection. Bulk import maps file
columns onto the three required fields and skips every row whose student
number is already known (stored, or seen earlier in the same file).
The allow-list is informational; user creation does not consult it.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from access.logic.access_guard import AccessGuard
from access.models import permission as perm
from core.common.latency import NoLatency, OperationLatency
from core.exceptions.errors import ImportFormatError, NotFoundError, ValidationError
from core.helpers.date_time_helper import today_iso
from core.helpers.id_generator import new_id
from core.helpers.query_helper import matches_search
from core.logging.logic.activity_logger import ActivityLogger
from whitelist.logic.whitelist_repository import WhitelistRepository
from whitelist.models.whitelist_entry import WhitelistEntry, WhitelistStatus

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "studentNumber", "email")

_FALLBACKS = {
    "name": "Unknown Student",
    "studentNumber": "0000000",
    "email": "no-email@cvsu.edu.ph",
}


@dataclass(frozen=True, slots=True)
class ImportResult:
    added: int
    skipped: int


class WhitelistService:
    def __init__(
        self,
        repository: WhitelistRepository,
        guard: AccessGuard,
        activity: ActivityLogger,
        *,
        latency: OperationLatency | None = None,
    ) -> None:
        self._repo = repository
        self._guard = guard
        self._activity = activity
        self._latency = latency or NoLatency()

    # ------------------------------------------------------------------ #
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    def list_entries(self, query: Optional[str] = None,
                     status: Optional[WhitelistStatus] = None) -> List[WhitelistEntry]:
        wanted = WhitelistStatus(status) if status else None
        return [
            e for e in self._repo.load_all()
            if matches_search(query, e.name, e.student_number, e.email)
            and (wanted is None or e.status is wanted)
        ]

    def get_entry(self, entry_id: str) -> WhitelistEntry:
        entry = self._repo.get(entry_id)
        if entry is None:
            raise NotFoundError("Whitelist entry", entry_id)
        return entry

    # ------------------------------------------------------------------ #
    #  Single entries                                                    #
    # ------------------------------------------------------------------ #
    def add_entry(self, name: str, student_number: str, email: str = "") -> WhitelistEntry:
        self._latency.pause("whitelist.add")
        self._guard.require_permission(perm.MANAGE_WHITELIST)
        entries = self._repo.load_all()
        entry = WhitelistEntry(
            id=new_id("wl"),
            name=(name or "").strip(),
            student_number=(student_number or "").strip(),
            email=(email or "").strip(),
            status=WhitelistStatus.PENDING,
            date_added=today_iso(),
        )
        self._validate(entry, entries)
        entries.append(entry)
        self._repo.save_all(entries)
        self._activity.log("Whitelisted Student", entry.name, entry.id)
        return entry

    def update_entry(self, entry: WhitelistEntry) -> WhitelistEntry:
        self._latency.pause("whitelist.update")
        self._guard.require_permission(perm.MANAGE_WHITELIST)
        self.get_entry(entry.id)
        entries = self._repo.load_all()
        cleaned = dataclasses.replace(
            entry,
            name=(entry.name or "").strip(),
            student_number=(entry.student_number or "").strip(),
            email=(entry.email or "").strip(),
            status=WhitelistStatus(entry.status),
        )
        self._validate(cleaned, [e for e in entries if e.id != entry.id])
        self._repo.save_all([cleaned if e.id == entry.id else e for e in entries])
        self._activity.log("Updated Whitelist Entry", cleaned.name, cleaned.id)
        return cleaned

    def delete_entry(self, entry_id: str) -> None:
        self._latency.pause("whitelist.delete")
        self._guard.require_permission(perm.MANAGE_WHITELIST)
        entry = self.get_entry(entry_id)
        self._repo.delete(entry_id)
        self._activity.log("Removed Whitelist Entry", entry.name, entry.id)

    # ------------------------------------------------------------------ #
    #  Bulk import                                                       #
    # ------------------------------------------------------------------ #
    def bulk_import(self, rows: List[Mapping[str, object]], mapping: Mapping[str, str]) -> ImportResult:
        """Append one PENDING entry per row; *mapping* maps field name to file header."""
        self._latency.pause("whitelist.bulk_import")
        self._guard.require_permission(perm.MANAGE_WHITELIST)
        if any(not (mapping.get(f) or "").strip() for f in REQUIRED_FIELDS):
            raise ImportFormatError("Please map all required fields.")

        entries = self._repo.load_all()
        known = {e.student_number for e in entries}
        today = today_iso()
        added: List[WhitelistEntry] = []
        skipped = 0
        for row in rows:
            values = self._map_row(row, mapping)
            if values["studentNumber"] in known:
                skipped += 1
                continue
            known.add(values["studentNumber"])
            added.append(WhitelistEntry(
                id=new_id("wl"),
                name=values["name"],
                student_number=values["studentNumber"],
                email=values["email"],
                status=WhitelistStatus.PENDING,
                date_added=today,
            ))

        if added:
            self._repo.save_all([*entries, *added])
        logger.info("Whitelist import: %d added, %d skipped", len(added), skipped)
        self._activity.log("Bulk Imported Whitelist", f"{len(added)} students", "WHITELIST")
        return ImportResult(added=len(added), skipped=skipped)

    # ------------------------------------------------------------------ #
    #  Interne Helfer                                                    #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _map_row(row: Mapping[str, object], mapping: Mapping[str, str]) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for field_name in REQUIRED_FIELDS:
            raw = row.get(mapping[field_name])
            text = "" if raw is None else str(raw).strip()
            values[field_name] = text or _FALLBACKS[field_name]
        return values

    @staticmethod
    def _validate(entry: WhitelistEntry, others: List[WhitelistEntry]) -> None:
        if not entry.name:
            raise ValidationError("Student name is required.")
        if not entry.student_number:
            raise ValidationError("Student number is required.")
        if any(o.student_number == entry.student_number for o in others):
            raise ValidationError(f"Student number {entry.student_number} is already whitelisted.")
