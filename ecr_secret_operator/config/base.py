# ecr_secret_operator/config/base.py

"""
Operator-wide settings, read from the environment or an optional .env file.
"""

from datetime import timedelta
from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..ksecret.durations import parse_duration


class LogFormat(str, Enum):
    """Supported log output formats."""

    TEXT = "text"
    JSON = "json"


class OperatorSettings(BaseSettings):
    """Settings supplied at process start."""

    model_config = SettingsConfigDict(
        env_prefix="ECR_SECRET_OPERATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_file: str = Field(
        default="/etc/ecr-secret-operator/config.toml",
        description="Path to the per-account credentials TOML file",
    )
    max_age: timedelta = Field(
        default=timedelta(hours=4), description="Maximum age of a generated secret"
    )
    scan_interval: timedelta = Field(
        default=timedelta(minutes=1), description="Time between renewal sweeps"
    )
    poll_interval: float = Field(
        default=0.5, gt=0, description="Renewal scanner polling granularity in seconds"
    )
    queue_size: int = Field(default=1024, ge=1)
    workers: int = Field(default=2, ge=1)
    requeue_delay: float = Field(
        default=30.0, ge=0, description="Seconds before a failed key is retried"
    )
    kubeconfig: str | None = None

    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.TEXT

    @field_validator("max_age", "scan_interval", mode="before")
    @classmethod
    def parse_go_duration(cls, v: Any) -> Any:
        """Accept durations written like '4h' or '12h0m0s'."""
        if isinstance(v, str):
            try:
                return parse_duration(v)
            except ValueError:
                # Fall through to pydantic's own ISO 8601 / seconds parsing
                return v
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()
