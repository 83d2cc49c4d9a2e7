"""
Job API configuration settings.

Base URL, endpoint paths and credentials for the remote job service.

Dependencies: pydantic_settings
System role: Remote job API connection configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class JobApiSettings(BaseSettings):
    """Connection settings for the job status/start REST API."""

    model_config = SettingsConfigDict(
        env_prefix="JOBWATCH_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the backend exposing job endpoints",
    )
    status_path: str = Field(
        default="/status/{job_id}",
        description="Job status endpoint template; must contain {job_id}",
    )
    import_path: str = Field(
        default="/import",
        description="Endpoint that starts an import job from raw text",
    )
    quest_generation_path: str = Field(
        default="/quests/{quest_id}/generate-steps",
        description="Endpoint that schedules quest step generation",
    )
    token: str | None = Field(
        default=None,
        description="Static bearer token attached to every request",
    )
