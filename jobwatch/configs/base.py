"""
Base configuration settings.

Shared settings loader plus the package-wide logging switches read by
observability.logger.configure_logging.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings loader for JOBWATCH_* variables and the local .env file."""

    model_config = SettingsConfigDict(
        env_prefix="JOBWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level (includes every poll)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def effective_log_level(self) -> str:
        """Level configure_logging applies when none is passed explicitly."""
        return "DEBUG" if self.debug else self.log_level
