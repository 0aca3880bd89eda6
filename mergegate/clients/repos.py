"""Repositories resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_repository_settings
from mergegate.types.repos import RepositorySettings
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport


class ReposClient:
    """Client for repository operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get_settings(self, repo: str) -> RepositorySettings:
        """
        Get the merge capabilities of a repository.

        Args:
            repo: Full repository name (``OWNER/REPO``)

        Returns:
            RepositorySettings with auto-merge, linear-history and merge-method flags

        Raises:
            NotFoundError: If the repository does not exist or is not visible
        """
        response = self.transport.request("GET", repo_path(repo))
        return parse_repository_settings(response)
