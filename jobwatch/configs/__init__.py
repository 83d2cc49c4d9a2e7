"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from jobwatch.configs.job_api import JobApiSettings
from jobwatch.configs.settings import Settings, get_settings
from jobwatch.configs.tracker import TrackerSettings

__all__ = ["JobApiSettings", "Settings", "TrackerSettings", "get_settings"]
