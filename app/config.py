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
    # Auth, relational tables and realtime live in Supabase

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for auth calls)"
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
    # Object Storage (S3)
    # -------------------------------------------------------------------------
    # Credentials fall back to the boto3 default chain when unset

    AWS_ACCESS_KEY_ID: str | None = Field(default=None)
    AWS_SECRET_ACCESS_KEY: str | None = Field(default=None)

    AWS_REGION: str = Field(
        default="us-east-1",
        description="Region of the upload bucket"
    )

    AWS_S3_BUCKET: str = Field(
        ...,
        description="Bucket that receives user uploads"
    )

    UPLOAD_URL_EXPIRES_SECONDS: int = Field(
        default=15 * 60,
        ge=60,
        le=7 * 24 * 3600,
        description="Lifetime of pre-signed upload URLs"
    )

    ALLOWED_UPLOAD_PREFIXES: str = Field(
        default="uploads/,processed/",
        description="Key prefixes the bucket policy allows (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (realtime relay)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL used for file event pub/sub"
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

    SITE_URL: str = Field(
        default="http://localhost:3000",
        description="Public site URL, used for email confirmation redirects"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    AUTH_COOKIE_SECURE: bool | None = Field(
        default=None,
        description="Force the Secure flag on auth cookies (defaults to production only)"
    )

    # -------------------------------------------------------------------------
    # Files / Message Constructor
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum size of a file read back for the constructor"
    )

    FILES_PAGE_SIZE: int = Field(
        default=50,
        ge=1,
        le=200,
        description="Default page size for the file listing"
    )

    CONSTRUCTOR_PAGE_SIZE: int = Field(
        default=25,
        ge=1,
        le=500,
        description="Columns per page in the message constructor"
    )

    TEXT_PREVIEW_LINES: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Lines of a text file exposed as its preview value"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

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
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_upload_prefixes_list(self) -> list[str]:
        """
        Parse ALLOWED_UPLOAD_PREFIXES into a list, each ending with "/".
        """
        prefixes = []
        for prefix in self.ALLOWED_UPLOAD_PREFIXES.split(","):
            prefix = prefix.strip()
            if prefix:
                prefixes.append(prefix if prefix.endswith("/") else f"{prefix}/")
        return prefixes

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def secure_cookies(self) -> bool:
        if self.AUTH_COOKIE_SECURE is not None:
            return self.AUTH_COOKIE_SECURE
        return self.is_production

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
