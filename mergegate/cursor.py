"""Cursor background-agent API client."""

import os
from typing import Any

from mergegate.client import env_timeout
from mergegate.clients import AgentsClient
from mergegate.exceptions import ConfigurationError
from mergegate.transport import HTTPTransport, RetryConfig


class CursorClient:
    """
    Client for the Cursor background-agent API.

    Example:
        ```python
        from mergegate.cursor import CursorClient

        with CursorClient.from_env() as cursor:
            agent = cursor.agents.get("bc-123")
            print(agent.pr_url)
        ```
    """

    DEFAULT_BASE_URL = "https://api.cursor.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("A Cursor API key is required")

        self.base_url = base_url
        self.timeout = timeout
        self._transport = HTTPTransport(
            base_url=base_url,
            token=api_key,
            timeout=timeout,
            retry_config=retry_config,
        )
        self.agents = AgentsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float | None = None,
        retry_config: RetryConfig | None = None,
    ) -> "CursorClient":
        """
        Create a client from environment variables.

        Environment variables:
            CURSOR_API_KEY / CURSOR_AGENT_KEY: API key (required)
            CURSOR_API_URL: Base URL (optional, default: https://api.cursor.com)
            MERGEGATE_TIMEOUT: Request timeout in seconds (optional)

        Raises:
            ConfigurationError: If no API key is set
        """
        api_key = os.environ.get("CURSOR_API_KEY") or os.environ.get("CURSOR_AGENT_KEY")
        if not api_key:
            raise ConfigurationError(
                "CURSOR_API_KEY or CURSOR_AGENT_KEY environment variable not set"
            )
        return cls(
            api_key=api_key,
            base_url=os.environ.get("CURSOR_API_URL", cls.DEFAULT_BASE_URL),
            timeout=timeout if timeout is not None else env_timeout(cls.DEFAULT_TIMEOUT),
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        return self._transport

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "CursorClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
