"""Async repositories resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_repository_settings
from mergegate.types.repos import RepositorySettings
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.async_transport import AsyncHTTPTransport


class AsyncReposClient:
    """Async client for repository operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get_settings(self, repo: str) -> RepositorySettings:
        """Get the merge capabilities of a repository."""
        response = await self.transport.request("GET", repo_path(repo))
        return parse_repository_settings(response)
