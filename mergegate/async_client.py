"""
mergegate async GitHub client.

Async twin of :class:`mergegate.client.GitHubClient`.
"""

import os
from typing import Any

from mergegate.async_clients import (
    AsyncChecksClient,
    AsyncPullsClient,
    AsyncReposClient,
    AsyncReviewsClient,
    AsyncUsersClient,
)
from mergegate.async_transport import AsyncHTTPTransport
from mergegate.client import GITHUB_HEADERS, env_github_token, env_timeout
from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    MergeGateError,
)
from mergegate.transport import RetryConfig
from mergegate.types.pulls import User


class AsyncGitHubClient:
    """
    Async client for the GitHub API.

    Example:
        ```python
        import asyncio
        from mergegate import AsyncGitHubClient

        async def main():
            async with AsyncGitHubClient.from_env() as client:
                pr = await client.pulls.get("octo/app", 42)
                print(pr.mergeable_state)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        if not token:
            raise ConfigurationError("A GitHub token is required")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            headers=GITHUB_HEADERS,
        )

        self.repos = AsyncReposClient(self._transport)
        self.pulls = AsyncPullsClient(self._transport)
        self.checks = AsyncChecksClient(self._transport)
        self.reviews = AsyncReviewsClient(self._transport)
        self.users = AsyncUsersClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float | None = None,
        retry_config: RetryConfig | None = None,
    ) -> "AsyncGitHubClient":
        """Create a client from the same environment variables as GitHubClient.from_env."""
        return cls(
            token=env_github_token(),
            base_url=os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL),
            timeout=timeout if timeout is not None else env_timeout(cls.DEFAULT_TIMEOUT),
            retry_config=retry_config,
        )

    async def check_auth(self) -> User:
        """Verify the token; raises AuthenticationError if GitHub rejects it or is unreachable."""
        try:
            return await self.users.current()
        except (AuthenticationError, AuthorizationError) as e:
            raise AuthenticationError(
                "NOT_AUTHENTICATED", f"GitHub API not authenticated: {e.message}", e.request_id
            ) from e
        except MergeGateError as e:
            raise AuthenticationError(
                "UNAVAILABLE", f"GitHub API not available: {e.message}", e.request_id
            ) from e

    @property
    def transport(self) -> AsyncHTTPTransport:
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncGitHubClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
