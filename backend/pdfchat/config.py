"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "PDF Chat"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Data paths (relative to where uvicorn runs, typically backend/)
    data_dir: Path = Path("data")

    # Uploads
    max_upload_mb: int = 10

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str | None = None  # Operator override, skips model discovery
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 60.0

    # Retry policy
    gemini_max_attempts: int = 3
    gemini_base_delay_seconds: float = 1.0
    gemini_max_delay_seconds: float = 10.0

    # Observability
    log_level: str = "INFO"

    @field_validator("gemini_model")
    @classmethod
    def blank_model_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def documents_dir(self) -> Path:
        return self.data_dir / "documents"

    @property
    def chats_dir(self) -> Path:
        return self.data_dir / "chats"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
