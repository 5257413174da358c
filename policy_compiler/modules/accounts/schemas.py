from pydantic import BaseModel, Field
from typing import Any, Dict

from policy_compiler.core.schemas import ValidityWindow


class AccountConfig(BaseModel):
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AccountPermissionOverride(ValidityWindow):
    permission_name: str = Field(min_length=1)
    is_grant: bool
    metadata: Dict[str, Any] = Field(default_factory=dict)
