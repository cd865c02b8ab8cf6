"""
S3 session bucket configuration.

Settings for the bucket holding recorded sessions, credentials and
presigned URL generation.

Dependencies: pydantic_settings
System role: Object store connection configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3StorageSettings(BaseSettings):
    """Settings for S3 session bucket operations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AWS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket_name: str = Field(
        default="screen-annotator-sessions",
        description="S3 bucket holding metadata, annotations and videos",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    access_key_id: str | None = Field(
        default=None,
        description="Static access key (falls back to the default credential chain)",
    )
    secret_access_key: str | None = Field(
        default=None,
        description="Static secret key paired with access_key_id",
    )
    role_arn: str | None = Field(
        default=None,
        description="IAM role assumed through STS before talking to S3",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )

    # Retry policy
    max_attempts: int = Field(default=3, description="botocore retry attempts per call")
    connect_timeout: float = Field(default=5.0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=30.0, description="Read timeout in seconds")
