"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the ShipQuote pricing backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging --
    log_level: str = "INFO"

    # -- Route distance buckets (miles, inclusive upper bounds) --
    route_short_max_miles: float = 500.0
    route_medium_max_miles: float = 1500.0
    route_short_key: str = "short"
    route_medium_key: str = "medium"
    route_long_key: str = "long"


settings = Settings()
