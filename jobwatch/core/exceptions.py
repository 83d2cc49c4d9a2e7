"""
Exception hierarchy for jobwatch.

Provides layered exception structure for job API and tracking errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the package
"""

from typing import Any


class JobWatchException(Exception):
    """Base exception for all jobwatch errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(JobWatchException):
    """Raised when caller input is invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class JobApiError(JobWatchException):
    """Base exception for failed calls against the remote job API."""

    def __init__(
        self,
        message: str,
        job_id: str | None = None,
        status_code: int | None = None,
        server_message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize job API error.

        Args:
            message: Error message for logs
            job_id: Job the request concerned
            status_code: HTTP status code, None for transport failures
            server_message: Message returned by the server, if any
            details: Additional context
        """
        details = details or {}
        if job_id:
            details["job_id"] = job_id
        if status_code is not None:
            details["status_code"] = status_code
        self.job_id = job_id
        self.status_code = status_code
        self.server_message = server_message
        super().__init__(message, details)


class JobNotFoundError(JobApiError):
    """Raised when the status endpoint answers 404 for a job."""

    def __init__(self, job_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize job not found error.

        Args:
            job_id: ID of the missing job
            details: Additional context
        """
        super().__init__(f"Job not found: {job_id}", job_id, 404, details=details)


class JobStatusRequestError(JobApiError):
    """Raised when a status request fails for any reason other than 404."""

    pass


class JobStartError(JobApiError):
    """Raised when a job-start request fails or returns no job id."""

    pass


class TrackerIdleError(JobWatchException):
    """Raised when waiting on a tracker that holds no job."""

    pass
