"""Shared configuration for processes embedding rbacgraph.

Provides the Pydantic-validated ``SharedConfig`` (log level, log format,
service name) consumed by :func:`rbacgraph.logging.setup_logging`.

The RBAC model itself (modules, roles, action hierarchy) lives in
:mod:`rbacgraph.permissions.models`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SharedConfig(BaseModel):
    """Ambient settings for processes embedding rbacgraph.

    RULE: settings come through this model. ``os.getenv`` is only used in
    :func:`load_shared_config_from_env`.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Logger name of the embedding service (e.g. 'billing-api')",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_shared_config_from_env() -> SharedConfig:
    """Load shared configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Logger name of the embedding service

    Returns:
        SharedConfig instance with values from environment or defaults.
    """
    import os

    return SharedConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        service_name=os.getenv("SERVICE_NAME"),
    )


__all__ = [
    "LogLevel",
    "SharedConfig",
    "load_shared_config_from_env",
]
