"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from pathlib import Path
from uuid import UUID

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Remote document store
    database_url: str | None = None

    # Remote identity (unset means the session falls back to local storage)
    owner_id: UUID | None = None
    app_id: str = "business-writer"

    # Local storage
    local_storage_path: Path = Path(".docwriter/local_storage.json")

    # Generation
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.7

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
