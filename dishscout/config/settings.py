"""Application configuration settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "dishscout"
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    log_format: Literal["keyvalue", "json"] = "keyvalue"

    # Sources
    local_menu_path: str = "data/restaurant_menus.json"
    primary_timeout_seconds: float = 3.0
    local_timeout_seconds: float = 1.0

    # Search defaults
    default_search_radius_km: float = 5.0
    default_country_code: str = "GB"
    default_limit: int = 10
    max_limit: int = 50
    per_restaurant_items: int = 3
    closing_soon_minutes: int = 60
    max_vibes: int = 6

    # Relevance noise (tie-breaking variety)
    relevance_noise_enabled: bool = True
    relevance_noise_max: float = 5.0
    random_seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
