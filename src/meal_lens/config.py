"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = None
    openai_temperature: float | None = None
    openai_store: bool = False
    analysis_timeout_seconds: float | None = 60.0
    image_target_width: int = 300
    image_quality: int = 70
    storage_backend: Literal["file", "supabase"] = "file"
    storage_path: str = ".data"
    storage_key: str = "nutrition_tracker_meals"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timeout(raw: float | None) -> float | None:
    """Treat zero or negative timeouts as disabled."""
    if raw is None or raw <= 0:
        return None
    return raw
