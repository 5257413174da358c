from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from policy_compiler.core import sql
from policy_compiler.core.validation import parse_config
from policy_compiler.modules.roles.models import ROLES_TABLE
from policy_compiler.modules.roles.schemas import RoleConfig, RolePermissionGroupAssignment


class RoleDefinition:
    """Ranked bundle of direct permissions and permission groups"""

    def __init__(self, registry, id: str, config: Union[Dict[str, Any], RoleConfig]):
        self.registry = registry
        self.id = id
        self.config = parse_config(RoleConfig, config, "role")
        self.permissions: List[str] = []
        self.permission_group_assignments: List[RolePermissionGroupAssignment] = []

        registry.add_role(id, self)

    @classmethod
    def create(cls, registry, id: str, config) -> "RoleDefinition":
        return cls(registry, id, config)

    @property
    def name(self) -> str:
        return self.config.name

    def identifier(self) -> str:
        return self.id

    def natural_key_lookup(self) -> str:
        return sql.natural_key_lookup(self.registry.table(ROLES_TABLE), "name", self.config.name)

    def add_permission(self, permission) -> "RoleDefinition":
        self.permissions.append(permission.identifier())
        return self

    def add_permissions(self, permissions: Iterable) -> "RoleDefinition":
        for permission in permissions:
            self.add_permission(permission)
        return self

    def add_permission_group(
        self,
        group,
        valid_from: Optional[datetime] = None,
        valid_until: Optional[datetime] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "RoleDefinition":
        """Attach a permission group; the assignment window is recorded only"""
        assignment = {"group_id": group.identifier(), "valid_from": valid_from, "valid_until": valid_until}
        if metadata is not None:
            assignment["metadata"] = metadata
        self.permission_group_assignments.append(
            parse_config(RolePermissionGroupAssignment, assignment, "role permission group assignment")
        )
        return self

    def get_permissions(self) -> List[str]:
        return list(self.permissions)

    def get_permission_groups(self) -> List[str]:
        return [assignment.group_id for assignment in self.permission_group_assignments]

    def emit(self) -> str:
        config = self.config
        return f"""
INSERT INTO {self.registry.table(ROLES_TABLE)} (name, description, rank, metadata, valid_from, valid_until)
VALUES (
  {sql.quote(config.name)},
  {sql.quote(config.description)},
  {int(config.rank)},
  {sql.json_literal(config.metadata)},
  {sql.timestamp_literal(config.valid_from)},
  {sql.timestamp_literal(config.valid_until)}
);"""
