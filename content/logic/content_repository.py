"""Content items stored under ``system_content``."""
from __future__ import annotations

from typing import Any, Dict

from content.models.content_item import ContentItem
from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import StorageKeys


class ContentRepository(JsonCollectionRepository[ContentItem]):
    KEY = StorageKeys.CONTENT
    KIND = "Content"

    def _from_dict(self, data: Dict[str, Any]) -> ContentItem:
        return ContentItem.from_dict(data)

    def _to_dict(self, item: ContentItem) -> Dict[str, Any]:
        return item.to_dict()
