"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the package
"""

from functools import lru_cache

from pydantic import Field

from jobwatch.configs.base import BaseSettings
from jobwatch.configs.job_api import JobApiSettings
from jobwatch.configs.tracker import TrackerSettings


class Settings(BaseSettings):
    """Unified settings aggregating all config modules."""

    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    job_api: JobApiSettings = Field(default_factory=JobApiSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once, on first call.

    Returns:
        Settings: Application settings instance

    Usage:
        from jobwatch.configs import get_settings
        settings = get_settings()
    """
    return Settings()
