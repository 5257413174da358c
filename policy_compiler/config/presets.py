"""
Preset Policies
Ready-made authorization graphs used by the seed script.

Each preset declares its permissions as data, then wires groups, roles and
the root account through the builders. Every call builds a fresh registry.
"""

from typing import Callable, Dict, List, Optional

from policy_compiler.core.exceptions import ConfigurationError
from policy_compiler.modules.accounts.definition import AccountDefinition
from policy_compiler.modules.permission_groups.definition import PermissionGroupDefinition
from policy_compiler.modules.permissions.definition import PermissionDefinition
from policy_compiler.modules.registry.service import ConfigurationRegistry
from policy_compiler.modules.roles.definition import RoleDefinition
from policy_compiler.modules.system_settings.definition import create_required_mfa_system_setting

ROOT_ACCOUNT_ID = "00000000-0000-0000-0000-000000000001"

ALL_STORAGE = {"bucket_name": "*", "path_pattern": "*"}

# (id, resource, action, name, description)
SOLO_SYSTEM_PERMISSIONS = [
    ("manage_system_settings", "system_setting", "*", "Manage System Settings",
     "Full control over system configuration and settings"),
    ("manage_accounts", "account", "*", "Manage All Accounts",
     "Complete account management - create, read, update, delete"),
    ("manage_roles", "role", "*", "Manage All Roles",
     "Complete role management and hierarchy configuration"),
    ("manage_permissions", "permission", "*", "Manage All Permissions",
     "Complete permission system administration"),
    ("manage_tables", "table", "*", "Manage Table Metadata",
     "Full control over table configurations and metadata"),
    ("read_logs", "log", "select", "Access Audit Logs",
     "Full access to system audit logs and activity tracking"),
    ("manage_system_auth_users", "auth_user", "*", "Manage System Auth Users",
     "Manage access to all auth users in the system"),
]

SOLO_DATA_PERMISSIONS = [
    {"id": "manage_all_public_tables", "name": "Manage All Public Tables",
     "description": "Complete CRUD access to all tables in public schema",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "*"},
    {"id": "read_auth_users_table", "name": "Read Auth Users Table",
     "description": "Read access to all auth users in the system",
     "scope": "table", "schema_name": "auth", "table_name": "users", "action": "select"},
    {"id": "manage_all_storage", "name": "Manage All Storage",
     "description": "Complete storage management across all buckets and paths",
     "scope": "storage", "action": "*", "metadata": ALL_STORAGE},
]

SMALL_TEAM_SYSTEM_PERMISSIONS = [
    ("manage_system_settings", "system_setting", "*", "Manage System Settings", "Full control over system configuration"),
    ("manage_accounts", "account", "*", "Manage Accounts", "Full account management capabilities"),
    ("manage_roles", "role", "*", "Manage Roles", "Complete role management"),
    ("manage_permissions", "permission", "*", "Manage Permissions", "Full permission system control"),
    ("manage_tables", "table", "*", "Manage Tables", "Full table metadata management"),
    ("manage_auth_users", "auth_user", "*", "Manage Auth Users", "Complete auth user management"),
    ("read_accounts", "account", "select", "Read Accounts", "View account information"),
    ("read_roles", "role", "select", "Read Roles", "View role information"),
    ("read_permissions", "permission", "select", "Read Permissions", "View permission information"),
    ("read_tables", "table", "select", "Read Tables", "View table metadata"),
    ("read_logs", "log", "select", "Read Logs", "Access to audit logs"),
    ("read_auth_users", "auth_user", "select", "Read System Auth Users", "View auth user information"),
    ("update_accounts", "account", "update", "Update Accounts", "Update customer account information"),
    ("update_auth_users", "auth_user", "update", "Update Auth Users", "Update auth user information"),
]

SMALL_TEAM_DATA_PERMISSIONS = [
    {"id": "manage_all_tables", "name": "Manage All Tables", "description": "Full CRUD access to all database tables",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "*"},
    {"id": "read_all_tables", "name": "Read All Tables", "description": "Read access to all database tables",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "select"},
    {"id": "update_customer_data", "name": "Update Customer Data", "description": "Update customer-related tables",
     "scope": "table", "schema_name": "public", "table_name": "customers,orders,support_tickets", "action": "update"},
    {"id": "manage_all_storage", "name": "Manage All Storage", "description": "Full storage management access",
     "scope": "storage", "action": "*", "metadata": ALL_STORAGE},
    {"id": "read_all_storage", "name": "Read All Storage", "description": "Read access to storage files",
     "scope": "storage", "action": "select", "metadata": ALL_STORAGE},
    {"id": "read_auth_table", "name": "Read Auth Table", "description": "Read access to the auth users table",
     "scope": "table", "schema_name": "auth", "table_name": "users", "action": "select"},
]

# group id -> (name, description, role id, role name, role description, rank, permission ids)
SMALL_TEAM_ROLES = {
    "global_admin_group": (
        "Global Administrator", "Complete system administration - full access to all features",
        "global_admin_role", "Global Admin", "Ultimate system administrator with complete access", 100,
        ["manage_system_settings", "manage_accounts", "manage_roles", "manage_permissions", "manage_tables",
         "manage_auth_users", "read_logs", "manage_all_tables", "manage_all_storage", "read_auth_table"],
    ),
    "developer_group": (
        "Developer", "Technical access for development, debugging, and maintenance",
        "developer_role", "Developer", "Technical team member with development and maintenance access", 80,
        ["read_accounts", "read_roles", "read_permissions", "manage_tables", "read_logs", "read_auth_users",
         "manage_all_tables", "read_all_storage", "read_auth_table"],
    ),
    "customer_support_group": (
        "Customer Support", "Customer assistance - read access with limited update capabilities",
        "customer_support_role", "Customer Support", "Support team member focused on customer assistance", 60,
        ["read_accounts", "update_accounts", "read_tables", "read_logs", "read_auth_users", "update_auth_users",
         "read_all_tables", "update_customer_data", "read_all_storage", "read_auth_table"],
    ),
}

SAAS_SYSTEM_PERMISSIONS = [
    ("manage_system_settings", "system_setting", "*", "Manage System Settings", "Full CRUD access to manage system settings"),
    ("manage_accounts", "account", "*", "Manage Accounts", "Full CRUD access to manage user accounts"),
    ("read_accounts", "account", "select", "Read Accounts", "Read access to user accounts"),
    ("update_accounts", "account", "update", "Update Accounts", "Update user accounts"),
    ("delete_accounts", "account", "delete", "Delete Accounts", "Delete user accounts"),
    ("manage_roles", "role", "*", "Manage Roles", "Full CRUD access to manage roles"),
    ("read_roles", "role", "select", "Read Roles", "Read access to roles"),
    ("update_roles", "role", "update", "Update Roles", "Update roles"),
    ("manage_permissions", "permission", "*", "Manage Permissions", "Full CRUD access to manage permissions"),
    ("read_permissions", "permission", "select", "Read Permissions", "Read access to permissions"),
    ("update_permissions", "permission", "update", "Update Permissions", "Update permissions"),
    ("manage_tables", "table", "*", "Manage Tables", "Full access to manage table metadata and configurations"),
    ("read_tables", "table", "select", "Read Tables", "Read access to table metadata"),
    ("update_tables", "table", "update", "Update Tables", "Update table metadata and configurations"),
    ("read_logs", "log", "select", "Read Logs", "Read access to system logs"),
    ("manage_auth_users", "auth_user", "*", "Manage Auth Users", "Full access to manage Supabase auth users"),
    ("read_auth_users", "auth_user", "select", "Read System Auth Users", "Read access to Supabase auth users"),
    ("update_auth_users", "auth_user", "update", "Update Auth Users", "Update Supabase auth users"),
]

SAAS_DATA_PERMISSIONS = [
    {"id": "manage_all_storage", "name": "Manage All Storage", "description": "Full access to manage all storage",
     "scope": "storage", "action": "*", "metadata": ALL_STORAGE},
    {"id": "read_all_storage", "name": "Read All Storage", "description": "Read access to all storage",
     "scope": "storage", "action": "select", "metadata": ALL_STORAGE},
    {"id": "manage_all_tables", "name": "Manage All Tables", "description": "Full CRUD access to all tables in public schema",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "*"},
    {"id": "read_all_tables", "name": "Read All Tables", "description": "Read access to all tables in public schema",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "select"},
    {"id": "read_auth_table", "name": "Read Auth Table", "description": "Read access to Supabase auth table",
     "scope": "table", "schema_name": "auth", "table_name": "users", "action": "select"},
    {"id": "update_all_tables", "name": "Update All Tables", "description": "Update access to all tables in public schema",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "update"},
    {"id": "insert_all_tables", "name": "Insert All Tables", "description": "Insert access to all tables in public schema",
     "scope": "table", "schema_name": "public", "table_name": "*", "action": "insert"},
]

# group id -> (name, description, permission ids)
SAAS_GROUPS = {
    "super_admin_group": (
        "Super Admin", "Full system access - all permissions",
        ["manage_accounts", "manage_all_tables", "delete_accounts", "manage_roles", "manage_permissions",
         "manage_tables", "read_logs", "manage_auth_users", "manage_system_settings", "manage_all_storage",
         "read_auth_table"],
    ),
    "admin_group": (
        "Administrator", "Administrative access to most system functions",
        ["read_accounts", "update_accounts", "read_roles", "read_permissions", "update_permissions", "update_roles",
         "update_tables", "read_tables", "read_logs", "read_auth_users", "update_auth_users", "manage_all_tables",
         "manage_all_storage", "read_auth_table"],
    ),
    "manager_group": (
        "Manager", "Content management and basic admin functions",
        ["read_accounts", "read_roles", "read_tables", "read_logs", "read_auth_users",
         "read_all_tables", "update_all_tables", "insert_all_tables", "read_all_storage"],
    ),
    "support_group": (
        "Customer Support", "Customer support access - read mostly, limited updates",
        ["read_accounts", "update_accounts", "read_tables", "read_logs", "read_auth_users",
         "read_all_tables", "read_auth_table"],
    ),
    "readonly_group": (
        "Read Only", "Read-only access to data and basic system info",
        ["read_accounts", "read_roles", "read_tables", "read_logs", "read_auth_users",
         "read_all_tables", "read_permissions", "read_auth_table"],
    ),
    "developer_group": (
        "Developer", "Technical access for developers and DevOps",
        ["read_accounts", "read_roles", "read_permissions", "manage_tables", "read_logs", "read_auth_users",
         "manage_all_tables", "read_all_storage", "read_auth_table"],
    ),
}

# role id -> (name, description, rank, group id)
SAAS_ROLES = {
    "root_role": ("Root", "Ultimate system access - use with extreme caution", 100, "super_admin_group"),
    "admin_role": ("Admin", "Administrative access to system functions", 90, "admin_group"),
    "manager_role": ("Manager", "Content management and basic admin functions", 70, "manager_group"),
    "developer_role": ("Developer", "Technical access for development and maintenance", 80, "developer_group"),
    "support_role": ("Customer Support", "Customer support and assistance functions", 60, "support_group"),
    "readonly_role": ("Read Only", "Read-only access to system data", 50, "readonly_group"),
}

STARTER_ACCOUNTS = [
    ("root", "202141c3-2dcd-4417-a01b-f8d7935f1c0c", "Root", "root@example.com"),
    ("admin", "91659851-467b-4eb0-8120-21b55f24c241", "Admin", "admin@example.com"),
    ("member", "4f898e68-bff2-4c31-b279-ed1e79479ea7", "Member", "member@example.com"),
    ("readonly", "e536826e-54ed-4b12-bb79-2803f5de082f", "Readonly", "readonly@example.com"),
]


def _define_permissions(registry: ConfigurationRegistry, system: List[tuple], data: List[dict]) -> Dict[str, PermissionDefinition]:
    permissions = {}
    for permission_id, resource, action, name, description in system:
        permissions[permission_id] = PermissionDefinition.create_system_permission(
            registry, permission_id, resource=resource, action=action, name=name, description=description
        )
    for entry in data:
        entry = dict(entry)
        permission_id = entry.pop("id")
        permissions[permission_id] = PermissionDefinition.create_data_permission(registry, permission_id, **entry)
    return permissions


def build_solo(root_account_id: Optional[str] = None, registry: Optional[ConfigurationRegistry] = None) -> ConfigurationRegistry:
    """Single operator with complete control over the project"""
    registry = registry or ConfigurationRegistry()
    permissions = _define_permissions(registry, SOLO_SYSTEM_PERMISSIONS, SOLO_DATA_PERMISSIONS)

    group = PermissionGroupDefinition.create(registry, "solopreneur_group", {
        "name": "Solopreneur Complete Access",
        "description": "Comprehensive permissions for solo business owners - full system control",
    })
    group.add_permissions(permissions.values())

    role = RoleDefinition.create(registry, "solopreneur_role", {
        "name": "Solopreneur",
        "description": "Complete system access for business owners working independently",
        "rank": 100,
    })
    role.add_permission_group(group)

    AccountDefinition.create(registry, root_account_id or ROOT_ACCOUNT_ID).assign_role(role)

    create_required_mfa_system_setting(registry, required=False)
    return registry


def build_small_team(root_account_id: Optional[str] = None, registry: Optional[ConfigurationRegistry] = None) -> ConfigurationRegistry:
    """Global admin, developers and customer support with separated duties"""
    registry = registry or ConfigurationRegistry()
    permissions = _define_permissions(registry, SMALL_TEAM_SYSTEM_PERMISSIONS, SMALL_TEAM_DATA_PERMISSIONS)

    roles = {}
    for group_id, (group_name, group_description, role_id, role_name, role_description, rank, permission_ids) in SMALL_TEAM_ROLES.items():
        group = PermissionGroupDefinition.create(registry, group_id, {
            "name": group_name,
            "description": group_description,
        })
        group.add_permissions(permissions[permission_id] for permission_id in permission_ids)

        roles[role_id] = RoleDefinition.create(registry, role_id, {
            "name": role_name,
            "description": role_description,
            "rank": rank,
        }).add_permission_group(group)

    AccountDefinition.create(registry, root_account_id or ROOT_ACCOUNT_ID, {
        "metadata": {
            "display_name": "Team Lead / Admin",
            "email": "admin@company.com",
            "department": "Leadership",
            "notes": "Global administrator with complete system access",
        },
    }).assign_role(roles["global_admin_role"])

    create_required_mfa_system_setting(registry, required=False)
    return registry


def build_starter(root_account_id: Optional[str] = None, registry: Optional[ConfigurationRegistry] = None) -> ConfigurationRegistry:
    """Four sample accounts (root, admin, member, readonly) on four ranked roles"""
    registry = registry or ConfigurationRegistry()

    accounts = {}
    for key, account_id, display_name, email in STARTER_ACCOUNTS:
        if key == "root" and root_account_id:
            account_id = root_account_id
        accounts[key] = AccountDefinition.create(registry, account_id, {
            "metadata": {"display_name": display_name, "email": email},
        })

    roles = {
        "root": RoleDefinition.create(registry, "root_role", {"name": "Root", "description": "Full system access", "rank": 100}),
        "admin": RoleDefinition.create(registry, "admin_role", {"name": "Administrator", "description": "Broad system access", "rank": 90}),
        "member": RoleDefinition.create(registry, "member_role", {"name": "Member", "description": "Limited access to system data", "rank": 50}),
        "readonly": RoleDefinition.create(registry, "readonly_role", {"name": "Readonly", "description": "Can only view data", "rank": 40}),
    }

    permissions = _define_permissions(registry, [
        ("update_system_data", "table", "update", "Update System Data", "Can update all managed tables"),
        ("manage_permission", "permission", "*", "Manage Permission", "Can manage permissions"),
        ("manage_account", "account", "*", "Manage Account", "Can manage accounts"),
        ("manage_all_auth_users", "auth_user", "*", "Manage All Auth Users", "Can manage all auth users in the system"),
        ("read_all_auth_users", "auth_user", "select", "Read All Auth Users", "Can read all auth users in the system"),
        ("manage_roles", "role", "*", "Manage Roles", "Can manage all roles (insert, create, update, delete)"),
    ], [
        {"id": "read_all_data", "name": "Read All Data", "description": "Can view all data in the system",
         "scope": "table", "schema_name": "public", "table_name": "*", "action": "select"},
        {"id": "update_all_data", "name": "Update All Data", "description": "Can update all data in the system",
         "scope": "table", "schema_name": "public", "table_name": "*", "action": "update"},
        {"id": "manage_all_data", "name": "Manage All Data", "description": "Can manage all data in the system",
         "scope": "table", "schema_name": "public", "table_name": "*", "action": "*"},
        {"id": "update_accounts", "name": "Update Accounts", "description": "Can update all accounts in the system",
         "scope": "table", "schema_name": "public", "table_name": "accounts", "action": "update"},
    ])

    administrator = PermissionGroupDefinition.create(registry, "administrator", {
        "name": "Administrator", "description": "Broad Permissions",
    }).add_permissions(permissions[p] for p in [
        "update_system_data", "manage_account", "read_all_data", "update_all_data",
        "manage_permission", "manage_all_data", "manage_roles", "manage_all_auth_users",
    ])
    content_management = PermissionGroupDefinition.create(registry, "content_management", {
        "name": "Content Management", "description": "Permissions for managing content",
    }).add_permissions(permissions[p] for p in ["read_all_data", "update_accounts", "read_all_auth_users"])
    readonly = PermissionGroupDefinition.create(registry, "readonly", {
        "name": "Read Only", "description": "Read only access to all data",
    }).add_permissions(permissions[p] for p in ["read_all_data", "read_all_auth_users"])

    roles["member"].add_permission_group(content_management)
    roles["admin"].add_permission_group(administrator)
    roles["root"].add_permission_group(administrator)
    roles["readonly"].add_permission_group(readonly)

    for key, account in accounts.items():
        account.assign_role(roles[key])

    return registry


def build_saas(root_account_id: Optional[str] = None, registry: Optional[ConfigurationRegistry] = None) -> ConfigurationRegistry:
    """Six ranked roles from root down to read-only, each backed by one group"""
    registry = registry or ConfigurationRegistry()
    permissions = _define_permissions(registry, SAAS_SYSTEM_PERMISSIONS, SAAS_DATA_PERMISSIONS)

    groups = {}
    for group_id, (name, description, permission_ids) in SAAS_GROUPS.items():
        groups[group_id] = PermissionGroupDefinition.create(registry, group_id, {
            "name": name,
            "description": description,
        }).add_permissions(permissions[permission_id] for permission_id in permission_ids)

    roles = {}
    for role_id, (name, description, rank, group_id) in SAAS_ROLES.items():
        roles[role_id] = RoleDefinition.create(registry, role_id, {
            "name": name,
            "description": description,
            "rank": rank,
        }).add_permission_group(groups[group_id])

    AccountDefinition.create(registry, root_account_id or ROOT_ACCOUNT_ID).assign_role(roles["root_role"])

    create_required_mfa_system_setting(registry, required=False)
    return registry


PRESETS: Dict[str, Callable[..., ConfigurationRegistry]] = {
    "solo": build_solo,
    "small_team": build_small_team,
    "starter": build_starter,
    "saas": build_saas,
}


def build_preset(name: str, root_account_id: Optional[str] = None) -> ConfigurationRegistry:
    builder = PRESETS.get(name)
    if builder is None:
        raise ConfigurationError(
            f"Unknown seed template '{name}'. Available: {', '.join(sorted(PRESETS))}",
            fields=["seed_template"],
        )
    return builder(root_account_id)
