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
#
# Service credentials, bucket and table settings are read once at process
# start; the clients built from them live on app.state (see app/main.py).
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str, lower: bool = False) -> list[str]:
    """Split a comma-separated setting into a clean list (empty items dropped)."""
    items = [item.strip() for item in value.split(",")]
    if lower:
        items = [item.lower() for item in items]
    return [item for item in items if item]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Database (student inquiries, media metadata, testimonials, profile)
    # and the default object store.

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 secret used to verify admin access tokens"
    )

    # -------------------------------------------------------------------------
    # Object Storage
    # -------------------------------------------------------------------------

    STORAGE_BACKEND: Literal["supabase", "s3"] = Field(
        default="supabase",
        description="Where photo/video binaries are stored"
    )

    MEDIA_BUCKET: str = Field(
        default="media",
        description="Bucket holding the photos/ and videos/ folders"
    )

    AWS_REGION: str = Field(default="ap-south-1", description="S3 region")
    AWS_ACCESS_KEY_ID: str = Field(default="", description="S3 access key")
    AWS_SECRET_ACCESS_KEY: str = Field(default="", description="S3 secret key")

    S3_PUBLIC_BASE_URL: str = Field(
        default="",
        description="Public base URL for S3 objects (CDN). Defaults to the bucket URL"
    )

    # -------------------------------------------------------------------------
    # Media Settings
    # -------------------------------------------------------------------------

    MEDIA_LIST_MAX_RESULTS: int = Field(
        default=500,
        ge=1,
        le=1000,
        description="Maximum number of items fetched for any media listing"
    )

    SIGNED_URL_TTL_SECONDS: int = Field(
        default=3600,
        ge=60,
        le=7 * 24 * 3600,
        description="Lifetime of signed download/upload URLs"
    )

    MAX_PHOTO_UPLOAD_MB: int = Field(default=20, ge=1, le=100)
    MAX_VIDEO_UPLOAD_MB: int = Field(default=100, ge=1, le=1024)

    ALLOWED_PHOTO_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.webp,.gif",
        description="Allowed photo extensions (comma-separated)"
    )

    ALLOWED_VIDEO_EXTENSIONS: str = Field(
        default=".mp4,.mov,.webm",
        description="Allowed video extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Academy
    # -------------------------------------------------------------------------

    ACADEMY_NAME: str = Field(default="NrityaPriya Dance Academy")

    ACADEMY_EMAIL: str = Field(
        default="",
        description="Inbox that receives new inquiry notifications"
    )

    ACADEMY_INSTAGRAM_URL: str = Field(default="https://www.instagram.com/nrityapriya_/")

    ACADEMY_PROFILE_ID: str = Field(
        default="main",
        description="Fixed id of the single academy profile document"
    )

    # -------------------------------------------------------------------------
    # Email (SMTP)
    # -------------------------------------------------------------------------
    # When SMTP_USER / SMTP_PASSWORD are missing, emails are only logged.

    SMTP_HOST: str = Field(default="smtp.gmail.com")
    SMTP_PORT: int = Field(default=465, ge=1, le=65535)
    SMTP_USER: str = Field(default="")
    SMTP_PASSWORD: str = Field(default="")
    EMAIL_FROM_NAME: str = Field(default="NrityaPriya Dance Academy")

    # -------------------------------------------------------------------------
    # Admin Access
    # -------------------------------------------------------------------------

    ADMIN_EMAILS: str = Field(
        default="",
        description="Comma-separated admin allowlist. Empty = any authenticated user"
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

    API_HOST: str = Field(default="0.0.0.0", description="Host to bind the API server to")

    API_PORT: int = Field(default=8000, ge=1, le=65535, description="Port for the API server")

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
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

        Example: "http://localhost:3000, https://academy.com" -> ["http://localhost:3000", "https://academy.com"]
        """
        return _split_csv(self.CORS_ORIGINS)

    @property
    def admin_emails_list(self) -> list[str]:
        """Admin allowlist, lowercased."""
        return _split_csv(self.ADMIN_EMAILS, lower=True)

    @property
    def allowed_photo_extensions_list(self) -> list[str]:
        return _split_csv(self.ALLOWED_PHOTO_EXTENSIONS, lower=True)

    @property
    def allowed_video_extensions_list(self) -> list[str]:
        return _split_csv(self.ALLOWED_VIDEO_EXTENSIONS, lower=True)

    @property
    def max_photo_upload_bytes(self) -> int:
        return self.MAX_PHOTO_UPLOAD_MB * 1024 * 1024

    @property
    def max_video_upload_bytes(self) -> int:
        return self.MAX_VIDEO_UPLOAD_MB * 1024 * 1024

    @property
    def email_configured(self) -> bool:
        """True when SMTP credentials are present."""
        return bool(self.SMTP_USER and self.SMTP_PASSWORD)

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

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
