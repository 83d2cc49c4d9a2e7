"""
Progress tracker configuration settings.

Poll cadence, timeout bounds and user-facing messages for JobProgressTracker.

Dependencies: pydantic_settings
System role: Tuning knobs for job polling and timeout classification
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class TrackerSettings(BaseSettings):
    """Polling and timeout configuration for job progress tracking."""

    model_config = SettingsConfigDict(
        env_prefix="JOBWATCH_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between two status polls",
    )
    startup_timeout_polls: int = Field(
        default=45,
        ge=1,
        description="Not-found polls tolerated before the job is declared never started",
    )
    processing_timeout_polls: int = Field(
        default=300,
        ge=1,
        description="Processing polls tolerated before the job is declared stuck",
    )
    missing_after_success_means_done: bool = Field(
        default=True,
        description=(
            "Treat a 404 after the job was seen at least once as completion "
            "(backend deletes finished job records)"
        ),
    )

    completion_message: str = Field(default="Import completed successfully!")
    startup_timeout_message: str = Field(default="Import job initialization timed out.")
    processing_timeout_message: str = Field(
        default="Import is taking longer than expected. Please try again later."
    )
    status_check_failed_message: str = Field(default="Failed to check import status.")
    job_failed_message: str = Field(default="Import failed.")
