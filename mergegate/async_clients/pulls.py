"""Async pull requests resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import (
    parse_auto_merge_response,
    parse_merge_response,
    parse_pull_request,
)
from mergegate.clients.pulls import (
    ENABLE_AUTO_MERGE_MUTATION,
    auto_merge_variables,
    check_merge_method,
)
from mergegate.types.pulls import MergeResponse, PullRequestStatus
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.async_transport import AsyncHTTPTransport


class AsyncPullsClient:
    """Async client for pull request operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async pulls client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, repo: str, pr_number: int) -> PullRequestStatus:
        """Get the live status of a pull request."""
        response = await self.transport.request(
            "GET", f"{repo_path(repo)}/pulls/{pr_number}"
        )
        return parse_pull_request(response)

    async def list_open(self, repo: str, limit: int = 100) -> list[PullRequestStatus]:
        """List open pull requests, newest first."""
        response = await self.transport.request(
            "GET",
            f"{repo_path(repo)}/pulls",
            params={"state": "open", "per_page": min(limit, 100)},
        )
        return [parse_pull_request(pr) for pr in response[:limit]]

    async def merge(self, repo: str, pr_number: int, method: str = "merge") -> MergeResponse:
        """Merge a pull request immediately."""
        response = await self.transport.request(
            "PUT",
            f"{repo_path(repo)}/pulls/{pr_number}/merge",
            body={"merge_method": check_merge_method(method)},
        )
        return parse_merge_response(response)

    async def enable_auto_merge(self, pr: PullRequestStatus, method: str) -> MergeResponse:
        """Enable host-native auto-merge."""
        data = await self.transport.graphql(
            ENABLE_AUTO_MERGE_MUTATION, auto_merge_variables(pr, method)
        )
        return parse_auto_merge_response(data, method)

    async def update_branch(
        self, repo: str, pr_number: int, expected_head_sha: str | None = None
    ) -> str:
        """Bring the pull request branch up to date with its base branch."""
        body = {"expected_head_sha": expected_head_sha} if expected_head_sha else None
        response = await self.transport.request(
            "PUT", f"{repo_path(repo)}/pulls/{pr_number}/update-branch", body=body
        )
        return response.get("message", "Updating pull request branch.")
