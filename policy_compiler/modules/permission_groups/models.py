# Destination tables: permission_groups, permission_group_permissions

"""
Expected table structure:

permission_groups:
- id: uuid (primary key)
- name: varchar(100) (not null, unique)
- description: varchar(500) (nullable)
- metadata: jsonb (default: '{}')

permission_group_permissions:
- group_id: uuid (foreign key to permission_groups.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- added_at: timestamptz (default: now())
- primary key on (group_id, permission_id)
"""

PERMISSION_GROUPS_TABLE = "permission_groups"
PERMISSION_GROUP_PERMISSIONS_TABLE = "permission_group_permissions"
