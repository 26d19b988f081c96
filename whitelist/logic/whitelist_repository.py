"""Whitelist entries stored under ``whitelist_entries``."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import StorageKeys
from whitelist.models.whitelist_entry import WhitelistEntry

INITIAL_WHITELIST: List[Dict[str, Any]] = [
    {"id": "1", "name": "Maria Santos", "studentNumber": "202110123",
     "email": "maria.santos@cvsu.edu.ph", "status": "REGISTERED", "dateAdded": "2024-03-01"},
    {"id": "2", "name": "James Wilson", "studentNumber": "202110456",
     "email": "james.wilson@cvsu.edu.ph", "status": "PENDING", "dateAdded": "2024-03-05"},
    {"id": "3", "name": "Liza Ramos", "studentNumber": "202110789",
     "email": "liza.ramos@cvsu.edu.ph", "status": "REGISTERED", "dateAdded": "2024-03-10"},
    {"id": "4", "name": "Kevin Durant", "studentNumber": "202110111",
     "email": "kevin.durant@cvsu.edu.ph", "status": "PENDING", "dateAdded": "2024-03-12"},
]


class WhitelistRepository(JsonCollectionRepository[WhitelistEntry]):
    KEY = StorageKeys.WHITELIST
    KIND = "Whitelist entry"

    def _from_dict(self, data: Dict[str, Any]) -> WhitelistEntry:
        return WhitelistEntry.from_dict(data)

    def _to_dict(self, item: WhitelistEntry) -> Dict[str, Any]:
        return item.to_dict()

    def _seed(self) -> List[WhitelistEntry]:
        return [WhitelistEntry.from_dict(e) for e in INITIAL_WHITELIST]

    def find_by_student_number(self, student_number: str) -> Optional[WhitelistEntry]:
        return next((e for e in self.load_all() if e.student_number == student_number), None)
