from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class PermissionGroupConfig(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    metadata: Dict[str, Any] = Field(default_factory=dict)
