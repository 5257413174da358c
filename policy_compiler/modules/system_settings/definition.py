from policy_compiler.core import sql
from policy_compiler.core.exceptions import ConfigurationError
from policy_compiler.modules.system_settings.models import CONFIGURATION_TABLE, REQUIRES_MFA_KEY


class SystemSettingDefinition:
    """Flat key/value record stored in the configuration table"""

    def __init__(self, registry, key: str, value: str):
        if not isinstance(key, str) or not key:
            raise ConfigurationError("System setting key must be a non-empty string", fields=["key"])
        if not isinstance(value, str):
            raise ConfigurationError("System setting value must be a string", fields=["value"])
        self.registry = registry
        self.key = key
        self.value = value

        registry.add_system_setting(key, self)

    @classmethod
    def create(cls, registry, key: str, value: str) -> "SystemSettingDefinition":
        return cls(registry, key, value)

    def identifier(self) -> str:
        return self.key

    def emit(self) -> str:
        return f"""
INSERT INTO {self.registry.table(CONFIGURATION_TABLE)} (key, value)
VALUES ({sql.quote(self.key)}, '{sql.escape_sql(self.value)}');"""


def create_required_mfa_system_setting(registry, required: bool = True) -> SystemSettingDefinition:
    return SystemSettingDefinition.create(registry, REQUIRES_MFA_KEY, "true" if required else "false")
