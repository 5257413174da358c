from typing import Any, Dict, Iterable, List, Union

from policy_compiler.core import sql
from policy_compiler.core.validation import parse_config
from policy_compiler.modules.permission_groups.models import PERMISSION_GROUPS_TABLE
from policy_compiler.modules.permission_groups.schemas import PermissionGroupConfig


class PermissionGroupDefinition:
    """Named, reusable bundle of permission references"""

    def __init__(self, registry, id: str, config: Union[Dict[str, Any], PermissionGroupConfig]):
        self.registry = registry
        self.id = id
        self.config = parse_config(PermissionGroupConfig, config, "permission group")
        self.permissions: List[str] = []

        registry.add_permission_group(id, self)

    @classmethod
    def create(cls, registry, id: str, config) -> "PermissionGroupDefinition":
        return cls(registry, id, config)

    @property
    def name(self) -> str:
        return self.config.name

    def identifier(self) -> str:
        return self.id

    def natural_key_lookup(self) -> str:
        return sql.natural_key_lookup(self.registry.table(PERMISSION_GROUPS_TABLE), "name", self.config.name)

    def add_permission(self, permission) -> "PermissionGroupDefinition":
        # Duplicates are kept; the junction insert ignores conflicts
        self.permissions.append(permission.identifier())
        return self

    def add_permissions(self, permissions: Iterable) -> "PermissionGroupDefinition":
        for permission in permissions:
            self.add_permission(permission)
        return self

    def get_permissions(self) -> List[str]:
        return list(self.permissions)

    def emit(self) -> str:
        return f"""
INSERT INTO {self.registry.table(PERMISSION_GROUPS_TABLE)} (name, description, metadata)
VALUES (
  {sql.quote(self.config.name)},
  {sql.quote(self.config.description)},
  {sql.json_literal(self.config.metadata)}
);"""
