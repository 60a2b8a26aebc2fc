# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (bearer for edge function calls)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        ...,
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Vivino Configuration
    # -------------------------------------------------------------------------

    VIVINO_FETCH_URL: str | None = Field(
        default=None,
        description="Fetch-by-id endpoint used by the sweep "
                    "(defaults to the fetch-vivino-data edge function)"
    )

    VIVINO_API_BASE_URL: str = Field(
        default="https://www.vivino.com/api",
        description="Base URL of the upstream Vivino API"
    )

    VIVINO_USER_AGENT: str = Field(
        default="Mozilla/5.0 (compatible; WineCellarBrain/1.0)",
        description="User-Agent sent to Vivino"
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for each outbound HTTP call"
    )

    # -------------------------------------------------------------------------
    # Batch Enrichment Settings
    # -------------------------------------------------------------------------

    ENRICH_DELAY_SECONDS: float = Field(
        default=2.0,
        ge=0.0,
        description="Fixed delay after every Vivino call (1 request per 2 seconds)"
    )

    ENRICH_DEFAULT_LIMIT: int = Field(
        default=1000,
        ge=1,
        description="Candidate limit used when the caller omits one"
    )

    DRY_RUN_SAMPLE_SIZE: int = Field(
        default=10,
        ge=0,
        description="How many candidates a dry run echoes back"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (production sets env vars directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://cellar.app" -> ["http://localhost:5173", "https://cellar.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def vivino_fetch_url(self) -> str:
        """Resolved sibling fetch endpoint."""
        if self.VIVINO_FETCH_URL:
            return self.VIVINO_FETCH_URL
        return f"{self.SUPABASE_URL.rstrip('/')}/functions/v1/fetch-vivino-data"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
