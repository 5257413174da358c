# Destination tables: accounts, account_roles, account_permissions
# plus the external identity table <auth schema>.users

"""
Expected table structure:

accounts:
- id: uuid (primary key)
- auth_user_id: uuid (not null, unique, foreign key to auth.users.id) - natural key
- is_active: boolean (default: true)
- metadata: jsonb (object)
- preferences: jsonb (object)

account_roles:
- account_id: uuid (foreign key to accounts.id, not null)
- role_id: uuid (foreign key to roles.id, not null)
- assigned_at: timestamptz (default: now())
- primary key on (account_id, role_id)

account_permissions:
- account_id: uuid (foreign key to accounts.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- is_grant: boolean (not null) - false records an explicit deny
- valid_from / valid_until: timestamptz (nullable)
- metadata: jsonb (default: '{}')

auth.users:
- raw_app_meta_data: jsonb - the compiler merges {"supamode_access": "true"}
"""

ACCOUNTS_TABLE = "accounts"
ACCOUNT_ROLES_TABLE = "account_roles"
ACCOUNT_PERMISSIONS_TABLE = "account_permissions"
AUTH_USERS_TABLE = "users"

POLICY_ACCESS_FLAG = {"supamode_access": "true"}
