import pytest

from policy_compiler.modules.accounts.definition import AccountDefinition
from policy_compiler.modules.permission_groups.definition import PermissionGroupDefinition
from policy_compiler.modules.permissions.definition import PermissionDefinition
from policy_compiler.modules.registry.service import ConfigurationRegistry
from policy_compiler.modules.roles.definition import RoleDefinition


@pytest.fixture
def registry():
    return ConfigurationRegistry(schema_name="supamode", auth_schema_name="auth")


@pytest.fixture
def developer_graph(registry):
    """Two system permissions in a group, on a role, on one account"""
    read_logs = PermissionDefinition.create_system_permission(
        registry, "read_logs", resource="log", action="select", name="Read Logs",
    )
    manage_tables = PermissionDefinition.create_system_permission(
        registry, "manage_tables", resource="table", action="*", name="Manage Tables",
    )
    group = PermissionGroupDefinition.create(registry, "dev", {"name": "Developers"})
    group.add_permissions([read_logs, manage_tables])
    role = RoleDefinition.create(registry, "developer", {"name": "Developer", "rank": 80})
    role.add_permission_group(group)
    account = AccountDefinition.create(registry, "u1")
    account.assign_role(role)
    return {
        "registry": registry,
        "read_logs": read_logs,
        "manage_tables": manage_tables,
        "group": group,
        "role": role,
        "account": account,
    }
