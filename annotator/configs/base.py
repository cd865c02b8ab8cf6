"""
Base configuration settings.

Shared `.env` handling and the logging switches read by the API entry point.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with logging settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level (includes locator misses)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @property
    def effective_log_level(self) -> str:
        """Root log level passed to configure_logging."""
        return "DEBUG" if self.debug else self.log_level.upper()
