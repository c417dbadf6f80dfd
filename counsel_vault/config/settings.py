# counsel_vault/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "counsel-vault"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Security ---
    # 64 hex chars (32 bytes). Validated by KeyProvider, not here, so a bad key
    # surfaces as ConfigurationError at startup.
    database_encryption_key: Optional[SecretStr] = None

    # --- Confidential records ---
    content_min_length: int = Field(10, ge=1)
    content_max_length: int = Field(10_000, ge=1)

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./counsel_vault.db"

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @model_validator(mode="after")
    def content_bounds_ordered(self) -> "AppSettings":
        if self.content_min_length > self.content_max_length:
            raise ValueError("content_min_length must not exceed content_max_length")
        return self


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
