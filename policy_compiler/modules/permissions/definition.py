"""
Permission builder: one validated grant, either over the system itself or
over application data.
"""

from typing import Any, Dict, Optional, Union

from policy_compiler.core import sql
from policy_compiler.core.validation import parse_config
from policy_compiler.modules.permissions.models import PERMISSIONS_TABLE
from policy_compiler.modules.permissions.schemas import (
    DataPermissionConfig, PermissionAction, PermissionScope,
    SystemPermissionConfig, SystemResource, permission_config_adapter
)


class PermissionDefinition:
    def __init__(self, registry, id: str, config: Union[Dict[str, Any], SystemPermissionConfig, DataPermissionConfig]):
        self.registry = registry
        self.id = id
        self.config = parse_config(permission_config_adapter, config, "permission")

        registry.add_permission(id, self)

    @classmethod
    def create(cls, registry, id: str, config) -> "PermissionDefinition":
        return cls(registry, id, config)

    @classmethod
    def create_system_permission(
        cls,
        registry,
        id: str,
        *,
        resource: Union[str, SystemResource],
        action: Union[str, PermissionAction],
        name: str,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "PermissionDefinition":
        """Build and register a permission over a system resource"""
        config = {
            "permission_type": "system",
            "name": name,
            "description": description,
            "system_resource": resource,
            "action": action,
        }
        if metadata is not None:
            config["metadata"] = metadata
        return cls(registry, id, config)

    @classmethod
    def create_data_permission(
        cls,
        registry,
        id: str,
        *,
        name: str,
        scope: Union[str, PermissionScope],
        action: Union[str, PermissionAction],
        description: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
        column_name: Optional[str] = None,
        constraints: Optional[Dict[str, Any]] = None,
        conditions: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "PermissionDefinition":
        """Build and register a table, column or storage permission"""
        config = {
            "permission_type": "data",
            "name": name,
            "description": description,
            "scope": scope,
            "action": action,
            "schema_name": schema_name,
            "table_name": table_name,
            "column_name": column_name,
            "constraints": constraints,
            "conditions": conditions,
        }
        if metadata is not None:
            config["metadata"] = metadata
        return cls(registry, id, config)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def is_system(self) -> bool:
        return isinstance(self.config, SystemPermissionConfig)

    def identifier(self) -> str:
        return self.id

    def natural_key_lookup(self) -> str:
        return sql.natural_key_lookup(self.registry.table(PERMISSIONS_TABLE), "name", self.config.name)

    def emit(self) -> str:
        config = self.config
        table = self.registry.table(PERMISSIONS_TABLE)

        if self.is_system:
            return f"""
INSERT INTO {table} (name, description, permission_type, system_resource, action, metadata)
VALUES (
  {sql.quote(config.name)},
  {sql.quote(config.description)},
  'system',
  {sql.quote(config.system_resource.value)},
  {sql.quote(config.action.value)},
  {sql.json_literal(config.metadata)}
);"""

        return f"""
INSERT INTO {table} (name, description, permission_type, scope, schema_name, table_name, column_name, action, constraints, conditions, metadata)
VALUES (
  {sql.quote(config.name)},
  {sql.quote(config.description)},
  'data',
  {sql.quote(config.scope.value)},
  {sql.quote(config.schema_name)},
  {sql.quote(config.table_name)},
  {sql.quote(config.column_name)},
  {sql.quote(config.action.value)},
  {sql.json_literal(config.constraints, nullable=True)},
  {sql.json_literal(config.conditions, nullable=True)},
  {sql.json_literal(config.metadata)}
);"""

    def __repr__(self) -> str:
        return f"PermissionDefinition(id={self.id!r}, name={self.config.name!r})"
