"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Gemini
    gemini_api_key: str = ""
    detector_timeout_seconds: float = 10.0
    enrichment_enabled: bool = True
    enrichment_timeout_seconds: float = 10.0

    # Supabase
    supabase_url: str = ""
    supabase_service_key: str = ""

    # Webhook ingress
    webhook_secret: str = ""

    # Events
    default_event_duration_minutes: int = 60
    event_timezone: str = "UTC"

    # Logging
    environment: str = "development"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
