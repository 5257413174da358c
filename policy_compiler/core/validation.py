from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing import Any, Type, Union

from policy_compiler.core.exceptions import ConfigurationError


def parse_config(schema: Union[Type[BaseModel], TypeAdapter], data: Any, entity_kind: str) -> Any:
    """Validate raw configuration, translating pydantic errors into ConfigurationError"""
    if isinstance(data, BaseModel) and isinstance(schema, type) and isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(data)
        return schema.model_validate(data)
    except PydanticValidationError as e:
        fields = []
        details = []
        for error in e.errors():
            path = ".".join(str(part) for part in error["loc"]) or "__root__"
            fields.append(path)
            details.append(f"{path}: {error['msg']}")
        raise ConfigurationError(
            f"Invalid {entity_kind} configuration: " + "; ".join(details),
            fields=fields,
        ) from e
