# Destination tables: roles, role_permissions, role_permission_groups

"""
Expected table structure:

roles:
- id: uuid (primary key)
- name: varchar(50) (not null, unique)
- description: varchar(500) (nullable)
- rank: integer (not null, 0-100) - higher rank wins at enforcement time
- metadata: jsonb (default: '{}')
- valid_from / valid_until: timestamptz (nullable)

role_permissions:
- role_id: uuid (foreign key to roles.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- primary key on (role_id, permission_id)

role_permission_groups:
- role_id: uuid (foreign key to roles.id, not null)
- group_id: uuid (foreign key to permission_groups.id, not null)
- assigned_at: timestamptz (default: now())
- valid_from / valid_until / metadata: per-assignment columns, not written by the compiler
- primary key on (role_id, group_id)
"""

ROLES_TABLE = "roles"
ROLE_PERMISSIONS_TABLE = "role_permissions"
ROLE_PERMISSION_GROUPS_TABLE = "role_permission_groups"
