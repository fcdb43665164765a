"""
Pipeline configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOGGING_CONFIG_PATH = str(Path(__file__).resolve().parent.parent / "logging.yml")


class PipelineSettings(BaseSettings):
    """
    Process-wide settings for handlers and the invocation client.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOGGING_CONFIG_PATH: str = Field(
        default=DEFAULT_LOGGING_CONFIG_PATH, description="logging dictConfig YAML path"
    )

    # ===== Invocation client =====
    AWS_REGION: Optional[str] = Field(default=None, description="Region for the Lambda client")
    LAMBDA_ENDPOINT_URL: Optional[str] = Field(
        default=None, description="Override Lambda endpoint (local emulators)"
    )
    LAMBDA_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connect timeout (seconds)")
    LAMBDA_READ_TIMEOUT: float = Field(
        default=900.0, description="Read timeout for synchronous invokes (seconds)"
    )
    LAMBDA_MAX_ATTEMPTS: int = Field(
        default=1, ge=1, description="botocore max attempts (1 disables retries)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )
