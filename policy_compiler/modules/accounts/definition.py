"""
Account builder: the policy-facing side of an externally authenticated user.

The account id is the external identity id, so the persisted row is found by
auth_user_id rather than by a name.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from policy_compiler.core import sql
from policy_compiler.core.exceptions import ConfigurationError
from policy_compiler.core.validation import parse_config
from policy_compiler.modules.accounts.models import (
    ACCOUNTS_TABLE, AUTH_USERS_TABLE, POLICY_ACCESS_FLAG
)
from policy_compiler.modules.accounts.schemas import AccountConfig, AccountPermissionOverride


class AccountDefinition:
    def __init__(self, registry, id: str, config: Optional[Union[Dict[str, Any], AccountConfig]] = None):
        if not isinstance(id, str) or not id:
            raise ConfigurationError("Account id must be a non-empty string", fields=["id"])
        self.registry = registry
        self.id = id
        self.config = parse_config(AccountConfig, config if config is not None else {}, "account")
        self.roles: List[str] = []
        self.permission_overrides: List[AccountPermissionOverride] = []

        registry.add_account(id, self)

    @classmethod
    def create(cls, registry, id: str, config=None) -> "AccountDefinition":
        return cls(registry, id, config)

    def identifier(self) -> str:
        return self.id

    def natural_key_lookup(self) -> str:
        return sql.natural_key_lookup(self.registry.table(ACCOUNTS_TABLE), "auth_user_id", self.id)

    def assign_role(self, role) -> "AccountDefinition":
        self.roles.append(role.identifier())
        return self

    def grant_permission(
        self,
        permission,
        valid_from: Optional[datetime] = None,
        valid_until: Optional[datetime] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "AccountDefinition":
        return self._add_override(permission, True, valid_from, valid_until, metadata)

    def deny_permission(
        self,
        permission,
        valid_from: Optional[datetime] = None,
        valid_until: Optional[datetime] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "AccountDefinition":
        return self._add_override(permission, False, valid_from, valid_until, metadata)

    def _add_override(self, permission, is_grant, valid_from, valid_until, metadata) -> "AccountDefinition":
        # Overrides hold the permission name, not its id; resolution happens in the database
        override = {
            "permission_name": permission.name,
            "is_grant": is_grant,
            "valid_from": valid_from,
            "valid_until": valid_until,
        }
        if metadata is not None:
            override["metadata"] = metadata
        self.permission_overrides.append(
            parse_config(AccountPermissionOverride, override, "account permission override")
        )
        return self

    def get_roles(self) -> List[str]:
        return list(self.roles)

    def get_permission_overrides(self) -> List[AccountPermissionOverride]:
        return list(self.permission_overrides)

    def emit(self) -> List[str]:
        """Flag the external identity as policy-managed, then insert the account row"""
        users_table = self.registry.auth_table(AUTH_USERS_TABLE)
        flag_statement = (
            f"UPDATE {users_table} "
            f"SET raw_app_meta_data = coalesce(raw_app_meta_data, '{{}}'::jsonb) || {sql.json_literal(POLICY_ACCESS_FLAG)} "
            f"WHERE id = {sql.quote(self.id)};"
        )
        account_statement = f"""INSERT INTO {self.registry.table(ACCOUNTS_TABLE)} (auth_user_id, metadata)
VALUES ({sql.quote(self.id)}, {sql.json_literal(self.config.metadata)});"""
        return [flag_statement, account_statement]
