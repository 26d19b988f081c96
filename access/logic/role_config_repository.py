"""Role configs stored under ``role_configs``."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from access.logic.permission_resolver import FACULTY_DEFAULT_PERMISSIONS, STUDENT_DEFAULT_PERMISSIONS
from access.models import permission as perm
from access.models.role_config import RoleConfig
from core.common.collection_repository import JsonCollectionRepository
from core.common.kv_store import StorageKeys


def default_role_configs() -> List[RoleConfig]:
    """Starting matrix of the role editor (Admin / Faculty / Student)."""
    faculty = list(FACULTY_DEFAULT_PERMISSIONS)
    faculty.insert(faculty.index(perm.VIEW_ANALYTICS), perm.EDIT_ASSESSMENTS)
    faculty.append(perm.VIEW_STUDENT_ANALYTICS)
    return [
        RoleConfig("Admin", perm.all_permission_ids(), is_system=True),
        RoleConfig("Faculty", faculty, is_system=True),
        RoleConfig("Student", list(STUDENT_DEFAULT_PERMISSIONS), is_system=True),
    ]


class RoleConfigRepository(JsonCollectionRepository[RoleConfig]):
    KEY = StorageKeys.ROLE_CONFIGS
    KIND = "Role"

    def _from_dict(self, data: Dict[str, Any]) -> RoleConfig:
        return RoleConfig.from_dict(data)

    def _to_dict(self, item: RoleConfig) -> Dict[str, Any]:
        return item.to_dict()

    def _id_of(self, item: RoleConfig) -> str:
        return item.key

    def _seed(self) -> List[RoleConfig]:
        return default_role_configs()

    def load_saved(self) -> Optional[List[RoleConfig]]:
        """Stored configs only; None while the matrix was never saved."""
        return self.load_all() if self.is_persisted() else None
