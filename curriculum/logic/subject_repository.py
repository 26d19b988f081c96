"""Subjects stored under ``psychology_core_subjects``."""
from __future__ import annotations

from typing import Any, Dict, List

from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import StorageKeys
from curriculum.models.subject import Subject

INITIAL_CORE_SUBJECTS: List[Dict[str, Any]] = [
    {
        "id": "s-1",
        "name": "Theories of Personality",
        "description": "Comprehensive study of major personality theories and their applications in clinical and social contexts.",
        "color": "#1e40af",
        "topics": [],
    },
    {
        "id": "s-2",
        "name": "Abnormal Psychology",
        "description": "Examination of psychopathology, diagnostic criteria, and various clinical perspectives on mental health.",
        "color": "#b91c1c",
        "topics": [],
    },
    {
        "id": "s-3",
        "name": "Industrial Psychology",
        "description": "Psychological principles applied to organizational behavior, workforce management, and human resources.",
        "color": "#047857",
        "topics": [],
    },
    {
        "id": "s-4",
        "name": "Psychological Assessment",
        "description": "Foundations of psychometrics, psychological testing methodologies, and professional evaluation standards.",
        "color": "#7c3aed",
        "topics": [],
    },
]


class SubjectRepository(JsonCollectionRepository[Subject]):
    KEY = StorageKeys.SUBJECTS
    KIND = "Subject"

    def _from_dict(self, data: Dict[str, Any]) -> Subject:
        return Subject.from_dict(data)

    def _to_dict(self, item: Subject) -> Dict[str, Any]:
        return item.to_dict()

    def _seed(self) -> List[Subject]:
        return [Subject.from_dict(s) for s in INITIAL_CORE_SUBJECTS]

    def find_by_name_or_id(self, ref: str) -> Subject | None:
        """Lookup by id first, then by the name cached on older records."""
        subjects = self.load_all()
        return (next((s for s in subjects if s.id == ref), None)
                or next((s for s in subjects if s.name == ref), None))
