"""
user_repository.py

Persistence of user accounts under ``registered_users``.

Passwords are kept as bcrypt hashes (``passwordHash``). Records that still
carry a plaintext ``password`` field are hashed on load and written back
once. The two default accounts are written on first access.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import bcrypt

from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import KeyValueStore, StorageKeys
from core.models.user import User, UserRole, UserStatus

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password123"

DEFAULT_USERS: List[Dict[str, Any]] = [
    {"id": "1", "name": "ADMIN", "email": "admin@cvsu.edu.ph",
     "role": UserRole.ADMIN.value, "status": UserStatus.ACTIVE.value, "lastLogin": "Never"},
    {"id": "2", "name": "PROFESSOR", "email": "faculty@cvsu.edu.ph",
     "role": UserRole.FACULTY.value, "status": UserStatus.ACTIVE.value, "lastLogin": "Never"},
]


class UserRepository(JsonCollectionRepository[User]):
    """Complete CRUD layer for `User` entities."""

    KEY = StorageKeys.USERS
    KIND = "User"

    def __init__(self, store: KeyValueStore, *, bcrypt_rounds: int = 12) -> None:
        super().__init__(store)
        self._rounds = bcrypt_rounds

    # ------------------------------------------------------------------ #
    # Mapping                                                            #
    # ------------------------------------------------------------------ #
    def _from_dict(self, data: Dict[str, Any]) -> User:
        return User.from_dict(data)

    def _to_dict(self, item: User) -> Dict[str, Any]:
        return item.to_dict(include_secret=True)

    # ------------------------------------------------------------------ #
    # Loading (seed + legacy migration)                                  #
    # ------------------------------------------------------------------ #
    def load_all(self) -> List[User]:
        raw = self.load_raw()
        if raw is None:
            users = [User.from_dict({**u, "passwordHash": self.hash_password(DEFAULT_PASSWORD)})
                     for u in DEFAULT_USERS]
            self.save_all(users)
            logger.info("Seeded %d default user account(s)", len(users))
            return users

        migrated = False
        records: List[Dict[str, Any]] = []
        for record in raw:
            if "password" in record:
                record = dict(record)
                plain = record.pop("password")
                if not record.get("passwordHash"):
                    record["passwordHash"] = self.hash_password(str(plain))
                migrated = True
            records.append(record)
        users = self.decode_all(records)
        if migrated:
            self.save_all(users)
            logger.info("Migrated plaintext passwords to bcrypt hashes")
        return users

    def replace_raw(self, records: List[Dict[str, Any]]) -> None:
        # Restored records may carry plaintext passwords; the next load hashes them.
        self._store.set(self.KEY, [dict(r) for r in records])

    # ------------------------------------------------------------------ #
    # Query helpers                                                      #
    # ------------------------------------------------------------------ #
    def find_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        return next((u for u in self.load_all() if u.email.lower() == wanted), None)

    # ------------------------------------------------------------------ #
    # Authentication / Password                                          #
    # ------------------------------------------------------------------ #
    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(self._rounds)).decode()

    @staticmethod
    def check_password(user: User, password: str) -> bool:
        if not user.password_hash:
            return False
        return bcrypt.checkpw(password.encode(), user.password_hash.encode())

    def verify_login(self, email: str, password: str) -> Optional[User]:
        user = self.find_by_email(email)
        if user and self.check_password(user, password):
            return user
        return None
