"""
Job API HTTP client.

Reads job status and starts jobs against the remote REST API, mapping
HTTP outcomes onto the jobwatch exception hierarchy.

Dependencies: httpx, pydantic, jobwatch.models, jobwatch.core.exceptions
System role: Boundary adapter between the tracker and the job service
"""

from typing import Any
from urllib.parse import quote

import httpx

from jobwatch.boundary.http.auth import BearerTokenAuth, TokenProvider
from jobwatch.configs import JobApiSettings, get_settings
from jobwatch.core.exceptions import (
    JobNotFoundError,
    JobStartError,
    JobStatusRequestError,
)
from jobwatch.models.job import JobStartResponse, StatusSnapshot
from jobwatch.observability.logger import get_logger

logger = get_logger(__name__)

_MESSAGE_KEYS = ("message", "detail", "error", "title")


def extract_server_message(response: httpx.Response) -> str | None:
    """
    Pull a human-readable error message out of a JSON error body.

    Args:
        response: Failed HTTP response

    Returns:
        str | None: First non-empty message field, None for non-JSON bodies
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in _MESSAGE_KEYS:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class JobApiClient:
    """
    Async client for job status and job-start endpoints.

    Satisfies the StatusFetcher protocol consumed by JobProgressTracker.
    No retry or custom timeout is layered on top of httpx defaults.
    """

    def __init__(
        self,
        base_url: str,
        *,
        status_path: str = "/status/{job_id}",
        import_path: str = "/import",
        quest_generation_path: str = "/quests/{quest_id}/generate-steps",
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Backend base URL
            status_path: Status endpoint template containing {job_id}
            import_path: Import job start endpoint
            quest_generation_path: Quest generation endpoint containing {quest_id}
            token_provider: Sync/async callable returning the bearer token
            transport: Custom httpx transport (tests, ASGI apps)
        """
        if "{job_id}" not in status_path:
            raise ValueError("status_path must contain a {job_id} placeholder")
        self._status_path = status_path
        self._import_path = import_path
        self._quest_generation_path = quest_generation_path
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=BearerTokenAuth(token_provider) if token_provider else None,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: JobApiSettings | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "JobApiClient":
        """
        Build a client from JobApiSettings.

        A static settings token is used when no provider is given.
        """
        settings = settings or get_settings().job_api
        if token_provider is None and settings.token:
            token = settings.token
            token_provider = lambda: token  # noqa: E731
        return cls(
            settings.base_url,
            status_path=settings.status_path,
            import_path=settings.import_path,
            quest_generation_path=settings.quest_generation_path,
            token_provider=token_provider,
            transport=transport,
        )

    async def __aenter__(self) -> "JobApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_status(self, job_id: str) -> StatusSnapshot:
        """
        Fetch the current status of a job.

        Args:
            job_id: Job identifier

        Returns:
            StatusSnapshot: Parsed status payload

        Raises:
            JobNotFoundError: HTTP 404
            JobStatusRequestError: Any other HTTP error, transport error or malformed body
        """
        path = self._status_path.format(job_id=quote(job_id, safe=""))
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            raise JobStatusRequestError(
                f"Status request for job {job_id} failed: {e}", job_id=job_id
            ) from e

        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        if response.is_error:
            raise JobStatusRequestError(
                f"Status request for job {job_id} failed with HTTP {response.status_code}",
                job_id=job_id,
                status_code=response.status_code,
                server_message=extract_server_message(response),
            )

        try:
            return StatusSnapshot.model_validate(response.json())
        except ValueError as e:
            raise JobStatusRequestError(
                f"Malformed status payload for job {job_id}",
                job_id=job_id,
                status_code=response.status_code,
            ) from e

    async def start_import(self, raw_text: str, **fields: Any) -> str:
        """
        Start an import job from raw text (multipart form upload).

        Args:
            raw_text: Source text to import
            **fields: Extra form fields (camelCase names expected by the API)

        Returns:
            str: Job ID to track

        Raises:
            JobStartError: Request failed or no job ID returned
        """
        form = {"rawText": (None, raw_text)}
        form.update({key: (None, str(value)) for key, value in fields.items()})
        return await self._post_for_job_id(self._import_path, files=form)

    async def start_quest_generation(self, quest_id: str) -> str:
        """
        Schedule quest step generation.

        Args:
            quest_id: Quest whose steps should be generated

        Returns:
            str: Job ID to track

        Raises:
            JobStartError: Request failed or no job ID returned
        """
        path = self._quest_generation_path.format(quest_id=quote(quest_id, safe=""))
        return await self._post_for_job_id(path)

    async def start_job(self, path: str, json: dict[str, Any] | None = None) -> str:
        """
        Start an arbitrary job with a JSON body.

        Returns:
            str: Job ID to track

        Raises:
            JobStartError: Request failed or no job ID returned
        """
        return await self._post_for_job_id(path, json=json)

    async def _post_for_job_id(self, path: str, **kwargs: Any) -> str:
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as e:
            raise JobStartError(f"Job start request to {path} failed: {e}") from e

        if response.is_error:
            raise JobStartError(
                f"Job start request to {path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                server_message=extract_server_message(response),
            )

        try:
            body = response.json()
        except ValueError as e:
            raise JobStartError(f"Job start response from {path} is not JSON") from e

        # Some endpoints wrap the payload in {"isSuccess": ..., "data": {...}}
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if not isinstance(body, dict):
            raise JobStartError(f"Unexpected job start response from {path}")

        started = JobStartResponse.model_validate(body)
        if not started.job_id:
            raise JobStartError(
                "No job ID returned from server",
                status_code=response.status_code,
            )
        logger.info(f"Started job {started.job_id} via {path}")
        return started.job_id
