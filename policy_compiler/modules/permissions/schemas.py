from enum import Enum
from pydantic import BaseModel, Field, TypeAdapter, model_validator
from typing import Annotated, Any, Dict, Literal, Optional, Union


class SystemResource(str, Enum):
    ACCOUNT = "account"
    ROLE = "role"
    PERMISSION = "permission"
    LOG = "log"
    TABLE = "table"
    AUTH_USER = "auth_user"
    SYSTEM_SETTING = "system_setting"


class PermissionAction(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    ALL = "*"


class PermissionScope(str, Enum):
    TABLE = "table"
    COLUMN = "column"
    STORAGE = "storage"


class SystemPermissionConfig(BaseModel):
    permission_type: Literal["system"]
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    system_resource: SystemResource
    action: PermissionAction
    metadata: Dict[str, Any] = Field(default_factory=dict)


class DataPermissionConfig(BaseModel):
    permission_type: Literal["data"]
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    scope: PermissionScope
    action: PermissionAction
    schema_name: Optional[str] = None
    table_name: Optional[str] = None
    column_name: Optional[str] = None
    constraints: Optional[Dict[str, Any]] = None
    conditions: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_storage_location(self):
        if self.scope == PermissionScope.STORAGE:
            for key in ("bucket_name", "path_pattern"):
                if not self.metadata.get(key):
                    raise ValueError(f"metadata.{key} is required for storage scope")
        return self


PermissionConfig = Annotated[
    Union[SystemPermissionConfig, DataPermissionConfig],
    Field(discriminator="permission_type"),
]

permission_config_adapter = TypeAdapter(PermissionConfig)
