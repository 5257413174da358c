from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "policy-compiler"
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"

    # Destination database
    schema_name: str = "supamode"
    auth_schema_name: str = "auth"

    # Seed generation
    seed_template: str = "solo"  # solo | small_team | starter | saas
    root_account_id: Optional[str] = None  # Falls back to the preset's placeholder id
    output_path: str = "supabase/seed.sql"
    strict_validation: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
