"""
core/common/collection_repository.py
====================================

Base class for the entity repositories.

Every collection lives under one storage key as a JSON list. ``save_all`` is
the only write primitive; ``upsert`` and ``delete`` are conveniences that
load, mutate in memory and write the whole collection back.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from core.common.kv_store import KeyValueStore
from core.exceptions.errors import MasteryHubError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonCollectionRepository(Generic[T]):
    """Whole-collection repository over a ``KeyValueStore``."""

    KEY: str = ""
    KIND: str = "Entity"

    def __init__(self, store: KeyValueStore) -> None:
        if not self.KEY:
            raise TypeError(f"{type(self).__name__} must define KEY")
        self._store = store

    # ------------------------------------------------------------------ #
    #  Mapping hooks                                                     #
    # ------------------------------------------------------------------ #
    def _from_dict(self, data: Dict[str, Any]) -> T:
        raise NotImplementedError

    def _to_dict(self, item: T) -> Dict[str, Any]:
        raise NotImplementedError

    def _id_of(self, item: T) -> str:
        return getattr(item, "id")

    def _seed(self) -> List[T]:
        """Records returned while nothing is stored (not written back)."""
        return []

    # ------------------------------------------------------------------ #
    #  Public API                                                        #
    # ------------------------------------------------------------------ #
    def is_persisted(self) -> bool:
        return self._store.get(self.KEY) is not None

    def load_raw(self) -> Optional[List[Dict[str, Any]]]:
        raw = self._store.get(self.KEY)
        if raw is not None and not isinstance(raw, list):
            raise MasteryHubError(f"Stored value under '{self.KEY}' is not a list")
        return raw

    def decode_all(self, records: Iterable[Dict[str, Any]]) -> List[T]:
        return [self._from_dict(r) for r in records]

    def load_all(self) -> List[T]:
        raw = self.load_raw()
        if raw is None:
            return self._seed()
        items = self.decode_all(raw)
        logger.debug("%s: loaded %d record(s)", self.KEY, len(items))
        return items

    def save_all(self, items: Iterable[T]) -> None:
        payload = [self._to_dict(i) for i in items]
        self._store.set(self.KEY, payload)
        logger.debug("%s: saved %d record(s)", self.KEY, len(payload))

    def replace_raw(self, records: List[Dict[str, Any]]) -> None:
        """Overwrite the collection with already-serialized records (backup restore)."""
        self.save_all(self.decode_all(records))

    def get(self, item_id: str) -> Optional[T]:
        return next((i for i in self.load_all() if self._id_of(i) == item_id), None)

    def upsert(self, item: T) -> T:
        items = self.load_all()
        item_id = self._id_of(item)
        for idx, existing in enumerate(items):
            if self._id_of(existing) == item_id:
                items[idx] = item
                break
        else:
            items.append(item)
        self.save_all(items)
        return item

    def delete(self, item_id: str) -> bool:
        items = self.load_all()
        kept = [i for i in items if self._id_of(i) != item_id]
        if len(kept) == len(items):
            return False
        self.save_all(kept)
        return True
