from pydantic import Field
from typing import Any, Dict, Optional

from policy_compiler.core.schemas import ValidityWindow


class RoleConfig(ValidityWindow):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    rank: int = Field(default=0, ge=0, le=100, strict=True)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RolePermissionGroupAssignment(ValidityWindow):
    """Role -> group membership; the window and metadata are kept but not emitted"""
    group_id: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
