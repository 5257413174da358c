# Destination tables: permissions
# This file documents the expected database schema
# Rows are written by the SQL emitted from definition.py

"""
Expected table structure (inside the configured schema, default "supamode"):

permissions:
- id: uuid (primary key)
- name: varchar(100) (not null, unique) - natural key used by every lookup subquery
- description: varchar(500) (nullable)
- permission_type: permission_type (not null) - 'system' or 'data'
- system_resource: system_resource (nullable) - system permissions only
- scope: permission_scope (nullable) - data permissions only: table | column | storage
- schema_name / table_name / column_name: varchar(64) (nullable) - '*' means all
- action: system_action (not null) - select | insert | update | delete | *
- constraints: jsonb (nullable)
- conditions: jsonb (nullable)
- metadata: jsonb (default: '{}') - storage scope requires bucket_name and path_pattern
- created_at / updated_at: timestamptz (default: now())
"""

PERMISSIONS_TABLE = "permissions"
