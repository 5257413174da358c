"""
ConfigurationRegistry: owns every entity of a policy graph by logical id,
validates cross references and compiles the graph into ordered SQL.

Later statements reference earlier rows only through natural-key subqueries,
so the phases below must run in this order.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from policy_compiler.config.settings import settings
from policy_compiler.core import sql
from policy_compiler.core.exceptions import (
    CompilationError, ConfigurationError, DuplicateIdentifierError,
    NotFoundError, ValidationError
)
from policy_compiler.modules.accounts.models import ACCOUNT_PERMISSIONS_TABLE, ACCOUNT_ROLES_TABLE
from policy_compiler.modules.permission_groups.models import PERMISSION_GROUP_PERMISSIONS_TABLE
from policy_compiler.modules.permissions.models import PERMISSIONS_TABLE
from policy_compiler.modules.registry.schemas import CompilationResult, Diagnostic
from policy_compiler.modules.roles.models import ROLE_PERMISSION_GROUPS_TABLE, ROLE_PERMISSIONS_TABLE

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class ConfigurationRegistry:
    def __init__(self, schema_name: Optional[str] = None, auth_schema_name: Optional[str] = None):
        self.schema_name = schema_name or settings.schema_name
        self.auth_schema_name = auth_schema_name or settings.auth_schema_name
        for field, value in (("schema_name", self.schema_name), ("auth_schema_name", self.auth_schema_name)):
            if not _IDENTIFIER_RE.match(value):
                raise ConfigurationError(f"Invalid {field}: '{value}'", fields=[field])

        self._permissions: Dict[str, object] = {}
        self._roles: Dict[str, object] = {}
        self._accounts: Dict[str, object] = {}
        self._permission_groups: Dict[str, object] = {}
        self._system_settings: Dict[str, object] = {}

    def table(self, name: str) -> str:
        return f"{self.schema_name}.{name}"

    def auth_table(self, name: str) -> str:
        return f"{self.auth_schema_name}.{name}"

    # Registration

    def _register(
        self, store: Dict[str, object], entity_kind: str, id: str, entity, unique_name: bool = False
    ) -> "ConfigurationRegistry":
        if id in store:
            raise DuplicateIdentifierError(entity_kind, id)
        # Names are the natural keys of the generated lookups
        if unique_name and any(existing.name == entity.name for existing in store.values()):
            raise DuplicateIdentifierError(f"{entity_kind} name", entity.name)
        store[id] = entity
        return self

    def add_system_setting(self, key: str, system_setting) -> "ConfigurationRegistry":
        return self._register(self._system_settings, "System setting", key, system_setting)

    def add_permission(self, id: str, permission) -> "ConfigurationRegistry":
        return self._register(self._permissions, "Permission", id, permission, unique_name=True)

    def add_role(self, id: str, role) -> "ConfigurationRegistry":
        return self._register(self._roles, "Role", id, role, unique_name=True)

    def add_account(self, id: str, account) -> "ConfigurationRegistry":
        return self._register(self._accounts, "Account", id, account)

    def add_permission_group(self, id: str, group) -> "ConfigurationRegistry":
        return self._register(self._permission_groups, "Permission group", id, group, unique_name=True)

    # Lookup

    def _lookup(self, store: Dict[str, object], entity_kind: str, id: str):
        entity = store.get(id)
        if entity is None:
            raise NotFoundError(entity_kind, id)
        return entity

    def get_permission(self, id: str):
        return self._lookup(self._permissions, "Permission", id)

    def get_role(self, id: str):
        return self._lookup(self._roles, "Role", id)

    def get_account(self, id: str):
        return self._lookup(self._accounts, "Account", id)

    def get_permission_group(self, id: str):
        return self._lookup(self._permission_groups, "Permission group", id)

    def get_system_setting(self, key: str):
        return self._lookup(self._system_settings, "System setting", key)

    def permissions(self) -> List:
        return list(self._permissions.values())

    def roles(self) -> List:
        return list(self._roles.values())

    def accounts(self) -> List:
        return list(self._accounts.values())

    def permission_groups(self) -> List:
        return list(self._permission_groups.values())

    def system_settings(self) -> List:
        return list(self._system_settings.values())

    # Validation

    def validate(self) -> None:
        """Fail on the first dangling reference in the graph"""
        for role in self._roles.values():
            for permission_id in role.get_permissions():
                if permission_id not in self._permissions:
                    raise ValidationError("Role", role.identifier(), "permission", permission_id)
            for group_id in role.get_permission_groups():
                if group_id not in self._permission_groups:
                    raise ValidationError("Role", role.identifier(), "permission group", group_id)

        for account in self._accounts.values():
            for role_id in account.get_roles():
                if role_id not in self._roles:
                    raise ValidationError("Account", account.identifier(), "role", role_id)

    # Compilation

    def _emit_links(
        self,
        result: CompilationResult,
        relation: str,
        owner,
        target_ids: Iterable[str],
        lookup: Callable,
        render: Callable,
    ) -> None:
        # A missing target skips this one link only
        for target_id in target_ids:
            try:
                target = lookup(target_id)
            except NotFoundError as e:
                result.diagnostics.append(Diagnostic(
                    relation=relation,
                    owner_id=owner.identifier(),
                    missing_id=target_id,
                    message=f"{e} when assigning to {relation} '{owner.identifier()}'",
                ))
                continue
            result.statements.append(render(owner, target))

    def _link_statement(self, table: str, columns: str, values: str) -> str:
        return f"""
INSERT INTO {self.table(table)} ({columns})
VALUES ({values})
ON CONFLICT DO NOTHING;"""

    def _override_statement(self, account, override) -> str:
        permission_lookup = sql.natural_key_lookup(self.table(PERMISSIONS_TABLE), "name", override.permission_name)
        return f"""
INSERT INTO {self.table(ACCOUNT_PERMISSIONS_TABLE)} (account_id, permission_id, is_grant, valid_from, valid_until, metadata)
VALUES (
  {account.natural_key_lookup()},
  {permission_lookup},
  {sql.bool_literal(override.is_grant)},
  {sql.timestamp_literal(override.valid_from)},
  {sql.timestamp_literal(override.valid_until)},
  {sql.json_literal(override.metadata)}
);"""

    def _begin_phase(self, statements: List[str], title: str) -> None:
        statements.append(f"-- {title}")
        logger.debug(f"Phase: {title}")

    def compile(self) -> CompilationResult:
        """Compile the graph into ordered statements plus diagnostics for skipped links"""
        result = CompilationResult()
        statements = result.statements

        try:
            self._begin_phase(statements, "Creating system settings")
            for system_setting in self._system_settings.values():
                statements.append(system_setting.emit())

            self._begin_phase(statements, "Creating permissions")
            for permission in self._permissions.values():
                statements.append(permission.emit())

            self._begin_phase(statements, "Creating permission groups")
            for group in self._permission_groups.values():
                statements.append(group.emit())

            self._begin_phase(statements, "Creating roles")
            for role in self._roles.values():
                statements.append(role.emit())

            self._begin_phase(statements, "Creating accounts")
            for account in self._accounts.values():
                statements.extend(account.emit())

            self._begin_phase(statements, "Assigning permissions to permission groups")
            for group in self._permission_groups.values():
                self._emit_links(
                    result, "permission group", group, group.get_permissions(), self.get_permission,
                    lambda g, p: self._link_statement(
                        PERMISSION_GROUP_PERMISSIONS_TABLE, "group_id, permission_id, added_at",
                        f"{g.natural_key_lookup()}, {p.natural_key_lookup()}, NOW()",
                    ),
                )

            self._begin_phase(statements, "Assigning permissions to roles")
            for role in self._roles.values():
                self._emit_links(
                    result, "role", role, role.get_permissions(), self.get_permission,
                    lambda r, p: self._link_statement(
                        ROLE_PERMISSIONS_TABLE, "role_id, permission_id",
                        f"{r.natural_key_lookup()}, {p.natural_key_lookup()}",
                    ),
                )

            self._begin_phase(statements, "Assigning permission groups to roles")
            for role in self._roles.values():
                self._emit_links(
                    result, "role", role, role.get_permission_groups(), self.get_permission_group,
                    lambda r, g: self._link_statement(
                        ROLE_PERMISSION_GROUPS_TABLE, "role_id, group_id, assigned_at",
                        f"{r.natural_key_lookup()}, {g.natural_key_lookup()}, NOW()",
                    ),
                )

            self._begin_phase(statements, "Assigning roles to accounts")
            for account in self._accounts.values():
                self._emit_links(
                    result, "account", account, account.get_roles(), self.get_role,
                    lambda a, r: self._link_statement(
                        ACCOUNT_ROLES_TABLE, "account_id, role_id, assigned_at",
                        f"{a.natural_key_lookup()}, {r.natural_key_lookup()}, NOW()",
                    ),
                )

            self._begin_phase(statements, "Creating account permission overrides")
            for account in self._accounts.values():
                for override in account.get_permission_overrides():
                    statements.append(self._override_statement(account, override))
        except Exception as e:
            raise CompilationError(f"Error generating SQL: {e}") from e

        result.statements = [statement for statement in statements if statement.strip()]
        return result

    def generate_sql(self) -> List[str]:
        """Compile and return the statement list, logging skipped relationships"""
        result = self.compile()
        for diagnostic in result.diagnostics:
            logger.warning(f"Warning: {diagnostic.message}")
        logger.info(
            f"Generated {len(result.statements)} statements "
            f"({len(result.diagnostics)} relationships skipped)"
        )
        return result.statements

    def to_script(self) -> str:
        return CompilationResult(statements=self.generate_sql()).to_script()
