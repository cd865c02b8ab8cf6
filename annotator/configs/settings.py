"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from annotator.configs.base import BaseSettings
from annotator.configs.local_videos import LocalVideoSettings
from annotator.configs.s3_storage import S3StorageSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    s3_storage: S3StorageSettings = S3StorageSettings()
    local_videos: LocalVideoSettings = LocalVideoSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from annotator.configs import get_settings
        settings = get_settings()
    """
    return Settings()
