"""
Bearer token authentication for job API requests.

Attaches the current access token to every outgoing request, fetching it
from a provider on each call so refreshed tokens are picked up.

Dependencies: httpx
System role: Request authentication for the job API client
"""

import inspect
from typing import AsyncGenerator, Awaitable, Callable, Generator, Optional, Union

import httpx

TokenProvider = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


class BearerTokenAuth(httpx.Auth):
    """httpx auth flow adding ``Authorization: Bearer <token>`` when a token exists."""

    def __init__(self, token_provider: TokenProvider) -> None:
        """
        Args:
            token_provider: Sync or async callable returning the token, or None
        """
        self._token_provider = token_provider

    @classmethod
    def static(cls, token: str) -> "BearerTokenAuth":
        """Build auth for a fixed token."""
        return cls(lambda: token)

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._token_provider()
        if inspect.isawaitable(token):
            raise RuntimeError("Async token provider requires an AsyncClient")
        self._apply(request, token)
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        self._apply(request, token)
        yield request

    @staticmethod
    def _apply(request: httpx.Request, token: str | None) -> None:
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
