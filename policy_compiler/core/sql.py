"""
SQL literal rendering shared by every entity emitter.

Statements are assembled as text, so every interpolated string goes through
escape_sql exactly once.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def escape_sql(value: str) -> str:
    """Double embedded single quotes"""
    return value.replace("'", "''")


def quote(value: Optional[str]) -> str:
    """Render a string literal, or NULL when the value is absent"""
    if value is None or value == "":
        return "NULL"
    return f"'{escape_sql(value)}'"


def json_literal(value: Optional[Dict[str, Any]], nullable: bool = False) -> str:
    """Render a jsonb literal; empty/absent values become '{}' unless nullable"""
    if value is None and nullable:
        return "NULL"
    payload = json.dumps(value or {}, default=str)
    return f"'{escape_sql(payload)}'::jsonb"


def timestamp_literal(value: Optional[datetime]) -> str:
    """Render a UTC timestamp; naive values are taken to be UTC already"""
    if value is None:
        return "NULL"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return f"'{escape_sql(value.isoformat())}'"


def bool_literal(value: bool) -> str:
    return "true" if value else "false"


def natural_key_lookup(table: str, column: str, value: str) -> str:
    """Subquery resolving a row id by its natural key"""
    return f"(SELECT id FROM {table} WHERE {column} = '{escape_sql(value)}')"
