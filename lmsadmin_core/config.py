"""
Unified configuration for the LMS admin console.

This module provides a single Settings class holding every environment
variable the console reads: per-tenant project URLs and credentials,
quotas, and the diagnostic secret. Values are loaded once at process
start and treated as immutable afterwards.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for the admin console.

    Per-tenant keys follow the pattern <KIND>_<CODE>, e.g. SUPABASE_URL_NSG,
    SUPABASE_ANON_KEY_NSG, SUPABASE_SERVICE_ROLE_KEY_NSG. Environment
    variables override values from the .env file.
    """

    # Service identification
    SERVICE_NAME: str = "lms-admin-console"
    LOG_LEVEL: str = "INFO"

    # Tenant enumeration order (discovery and cross-tenant fallback)
    TENANT_CODES: list[str] = ["NSG", "RMW", "DQW"]
    BUCKET_SEPARATOR: str = "-"
    BUCKET_SUFFIX: str = "LMS"

    # NSG project
    SUPABASE_URL_NSG: str = ""
    SUPABASE_ANON_KEY_NSG: str = ""
    SUPABASE_SERVICE_ROLE_KEY_NSG: str = ""
    BUCKET_QUOTA_GB_NSG: float | None = None

    # RMW project
    SUPABASE_URL_RMW: str = ""
    SUPABASE_ANON_KEY_RMW: str = ""
    SUPABASE_SERVICE_ROLE_KEY_RMW: str = ""
    BUCKET_QUOTA_GB_RMW: float | None = None

    # DQW project
    SUPABASE_URL_DQW: str = ""
    SUPABASE_ANON_KEY_DQW: str = ""
    SUPABASE_SERVICE_ROLE_KEY_DQW: str = ""
    BUCKET_QUOTA_GB_DQW: float | None = None

    # Default project the console signs into (account administration)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Storage
    BUCKET_QUOTA_GB: float = 1.0
    STORAGE_PAGE_SIZE: int = 1000

    # Diagnostic listing endpoint (disabled when empty)
    USAGE_DEBUG_SECRET: str = ""

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
