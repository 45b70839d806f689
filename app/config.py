# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.STORAGE_BUCKET)
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

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (needed for private storage and the KV table)"
    )

    # -------------------------------------------------------------------------
    # Storage & Record Store
    # -------------------------------------------------------------------------

    STORAGE_BUCKET: str = Field(
        default="showcase-images",
        min_length=3,
        description="Private storage bucket holding uploaded images"
    )

    KV_TABLE: str = Field(
        default="kv_store",
        description="Key/value table holding one row per record collection"
    )

    SIGNED_URL_TTL_SECONDS: int = Field(
        default=3600,
        ge=60,
        le=7 * 24 * 3600,
        description="Validity window of signed image URLs"
    )

    SERIALIZE_APPENDS: bool = Field(
        default=True,
        description="Serialize appends per collection inside this process"
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
        description="Enable debug mode (verbose logging)"
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

    API_PREFIX: str = Field(
        default="/api/v1",
        pattern=r"^(/[A-Za-z0-9._-]+)*$",
        description="Path prefix every content route is mounted under"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins in production (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

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
