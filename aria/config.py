"""
Application configuration.

Loads settings from environment variables (and an optional `.env` file).
The database connection string and the token signing secret have no
defaults: the process refuses to start without them.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # ==========================================================================
    # Database
    # ==========================================================================

    mongodb_uri: str = Field(min_length=1)
    mongodb_db_name: str = "aria_characters"
    mongodb_timeout_ms: int = 5000

    # "mongo" in every real deployment; "memory" keeps data in-process
    storage_backend: str = "mongo"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    auth_cookie_name: str = "token"
    cookie_secure: bool = True
    cookie_samesite: str = "none"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def token_max_age(self) -> int:
        """Token lifetime in seconds (also used as the cookie max-age)."""
        return self.jwt_expire_days * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
