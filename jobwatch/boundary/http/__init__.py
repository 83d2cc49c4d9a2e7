"""HTTP adapters for the remote job API."""

from jobwatch.boundary.http.auth import BearerTokenAuth, TokenProvider
from jobwatch.boundary.http.job_api_client import JobApiClient, extract_server_message

__all__ = ["BearerTokenAuth", "JobApiClient", "TokenProvider", "extract_server_message"]
