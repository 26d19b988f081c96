"""Assessments stored under ``system_assessments``."""
from __future__ import annotations

from typing import Any, Dict

from assessments.models.assessment import Assessment
from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import StorageKeys


class AssessmentRepository(JsonCollectionRepository[Assessment]):
    KEY = StorageKeys.ASSESSMENTS
    KIND = "Assessment"

    def _from_dict(self, data: Dict[str, Any]) -> Assessment:
        return Assessment.from_dict(data)

    def _to_dict(self, item: Assessment) -> Dict[str, Any]:
        return item.to_dict()
