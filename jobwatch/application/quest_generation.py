"""
Quest step generation service.

Schedules AI quest-step generation as a background job and reports its
state from single status checks driven by the caller.

Dependencies: jobwatch.boundary.http, jobwatch.models
System role: Quest generation job lifecycle
"""

import enum

from jobwatch.boundary.http.job_api_client import JobApiClient
from jobwatch.core.exceptions import JobApiError
from jobwatch.models.job import JobStatus
from jobwatch.observability.logger import get_logger

logger = get_logger(__name__)


class GenerationState(str, enum.Enum):
    """Client-side quest generation state."""

    IDLE = "idle"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class QuestGenerationService:
    """Start quest step generation and check on the resulting job."""

    def __init__(self, client: JobApiClient) -> None:
        self._client = client
        self.state = GenerationState.IDLE
        self.job_id: str | None = None
        self.error: str | None = None

    @property
    def is_generating(self) -> bool:
        return self.state is GenerationState.GENERATING

    async def start_generation(self, quest_id: str) -> str | None:
        """
        Schedule generation for a quest.

        Args:
            quest_id: Quest whose steps should be generated

        Returns:
            str | None: Job ID to poll, or None if scheduling failed
        """
        self.state = GenerationState.GENERATING
        self.error = None
        try:
            job_id = await self._client.start_quest_generation(quest_id)
        except JobApiError as e:
            self.error = e.server_message or e.message or "Failed to start generation"
            self.state = GenerationState.FAILED
            logger.error(f"Generation failed for quest {quest_id}: {self.error}")
            return None

        self.job_id = job_id
        logger.info(f"Generation started for quest {quest_id} with job {job_id}")
        return job_id

    async def check_status(self, job_id: str) -> JobStatus | None:
        """
        Check the generation job once.

        Args:
            job_id: Job returned by start_generation

        Returns:
            JobStatus | None: Reported status, None if the check failed
        """
        try:
            snapshot = await self._client.get_status(job_id)
        except JobApiError as e:
            self.error = e.server_message or e.message or "Failed to check status"
            logger.error(f"Status check failed for job {job_id}: {self.error}")
            return None

        logger.debug(f"Job {job_id} status: {snapshot.status}")
        if snapshot.status is JobStatus.SUCCEEDED:
            self.state = GenerationState.COMPLETED
            self.error = None
        elif snapshot.status is JobStatus.FAILED:
            self.state = GenerationState.FAILED
            self.error = snapshot.error or "Job failed"
        return snapshot.status

    def reset_state(self) -> None:
        self.state = GenerationState.IDLE
        self.job_id = None
        self.error = None
