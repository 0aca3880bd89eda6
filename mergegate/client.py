"""
mergegate GitHub client.

Provides the primary interface for talking to the GitHub REST and GraphQL APIs.
"""

import os
from typing import Any

from mergegate.clients import ChecksClient, PullsClient, ReposClient, ReviewsClient, UsersClient
from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    MergeGateError,
)
from mergegate.transport import HTTPTransport, RetryConfig
from mergegate.types.pulls import User

GITHUB_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def env_timeout(default: float) -> float:
    """Read ``MERGEGATE_TIMEOUT`` (seconds), falling back to ``default``."""
    raw = os.environ.get("MERGEGATE_TIMEOUT")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid MERGEGATE_TIMEOUT: {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"MERGEGATE_TIMEOUT must be positive, got {raw!r}")
    return value


def env_github_token() -> str:
    token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if not token:
        raise ConfigurationError("GH_TOKEN or GITHUB_TOKEN environment variable not set")
    return token


class GitHubClient:
    """
    Main client for the GitHub API.

    Aggregates the resource clients used by the merge gate.

    Example:
        ```python
        from mergegate import GitHubClient

        client = GitHubClient(token="ghp_...")
        # Or create from environment variables
        client = GitHubClient.from_env()

        settings = client.repos.get_settings("octo/app")
        pr = client.pulls.get("octo/app", 42)
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
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token or app installation token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        if not token:
            raise ConfigurationError("A GitHub token is required")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            headers=GITHUB_HEADERS,
        )

        self.repos = ReposClient(self._transport)
        self.pulls = PullsClient(self._transport)
        self.checks = ChecksClient(self._transport)
        self.reviews = ReviewsClient(self._transport)
        self.users = UsersClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float | None = None,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            GH_TOKEN / GITHUB_TOKEN: API token (required, GH_TOKEN wins)
            GITHUB_API_URL: Base URL for API (optional, default: https://api.github.com)
            MERGEGATE_TIMEOUT: Request timeout in seconds (optional)

        Raises:
            ConfigurationError: If no token is set
        """
        return cls(
            token=env_github_token(),
            base_url=os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL),
            timeout=timeout if timeout is not None else env_timeout(cls.DEFAULT_TIMEOUT),
            retry_config=retry_config,
        )

    def check_auth(self) -> User:
        """
        Verify the token once before doing any work.

        Returns:
            The authenticated user

        Raises:
            AuthenticationError: If GitHub is unreachable or rejects the token
        """
        try:
            return self.users.current()
        except (AuthenticationError, AuthorizationError) as e:
            raise AuthenticationError(
                "NOT_AUTHENTICATED", f"GitHub API not authenticated: {e.message}", e.request_id
            ) from e
        except MergeGateError as e:
            raise AuthenticationError(
                "UNAVAILABLE", f"GitHub API not available: {e.message}", e.request_id
            ) from e

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
