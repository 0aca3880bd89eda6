"""Pull requests resource client."""

from typing import TYPE_CHECKING, Any

from mergegate.clients._parsing import (
    parse_auto_merge_response,
    parse_merge_response,
    parse_pull_request,
)
from mergegate.exceptions import ValidationError
from mergegate.types.pulls import MergeResponse, PullRequestStatus
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport

MERGE_METHODS = ("merge", "rebase", "squash")

ENABLE_AUTO_MERGE_MUTATION = """
mutation EnableAutoMerge($pullRequestId: ID!, $mergeMethod: PullRequestMergeMethod!) {
  enablePullRequestAutoMerge(input: {pullRequestId: $pullRequestId, mergeMethod: $mergeMethod}) {
    pullRequest {
      number
      autoMergeRequest {
        enabledAt
        mergeMethod
      }
    }
  }
}
""".strip()


def check_merge_method(method: str) -> str:
    if method not in MERGE_METHODS:
        raise ValidationError(
            "INVALID_MERGE_METHOD",
            f"merge method must be one of {list(MERGE_METHODS)}, got: {method!r}",
        )
    return method


def auto_merge_variables(pr: PullRequestStatus, method: str) -> dict[str, Any]:
    if not pr.node_id:
        raise ValidationError(
            "MALFORMED_RESPONSE", f"PR #{pr.number} has no node id; cannot enable auto-merge"
        )
    return {"pullRequestId": pr.node_id, "mergeMethod": check_merge_method(method).upper()}


class PullsClient:
    """Client for pull request operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, repo: str, pr_number: int) -> PullRequestStatus:
        """
        Get the live status of a pull request.

        ``mergeable`` may be ``None`` on the first request after a push;
        GitHub computes it asynchronously.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            pr_number: Pull request number

        Returns:
            PullRequestStatus with mergeability, head SHA and refs

        Raises:
            NotFoundError: If pull request not found
        """
        response = self.transport.request("GET", f"{repo_path(repo)}/pulls/{pr_number}")
        return parse_pull_request(response)

    def list_open(self, repo: str, limit: int = 100) -> list[PullRequestStatus]:
        """
        List open pull requests, newest first.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            limit: Maximum number of pull requests (GitHub caps a page at 100)
        """
        response = self.transport.request(
            "GET",
            f"{repo_path(repo)}/pulls",
            params={"state": "open", "per_page": min(limit, 100)},
        )
        return [parse_pull_request(pr) for pr in response[:limit]]

    def merge(self, repo: str, pr_number: int, method: str = "merge") -> MergeResponse:
        """
        Merge a pull request immediately.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            pr_number: Pull request number
            method: "merge", "squash", or "rebase" (default: "merge")

        Returns:
            MergeResponse with the merge commit SHA

        Raises:
            ValidationError: If the PR is not mergeable (GitHub answers 405)
            ConflictError: If the head moved while merging
        """
        response = self.transport.request(
            "PUT",
            f"{repo_path(repo)}/pulls/{pr_number}/merge",
            body={"merge_method": check_merge_method(method)},
        )
        return parse_merge_response(response)

    def enable_auto_merge(self, pr: PullRequestStatus, method: str) -> MergeResponse:
        """
        Enable host-native auto-merge so GitHub merges once requirements pass.

        Args:
            pr: Pull request status (its ``node_id`` is required)
            method: "merge", "squash", or "rebase"

        Raises:
            ValidationError: If auto-merge is not allowed or the PR is already clean
        """
        data = self.transport.graphql(
            ENABLE_AUTO_MERGE_MUTATION, auto_merge_variables(pr, method)
        )
        return parse_auto_merge_response(data, method)

    def update_branch(
        self, repo: str, pr_number: int, expected_head_sha: str | None = None
    ) -> str:
        """
        Bring the pull request branch up to date with its base branch.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            pr_number: Pull request number
            expected_head_sha: Refuse the update if the head moved past this SHA

        Returns:
            GitHub's status message

        Raises:
            ValidationError: On merge conflicts (GitHub answers 422)
        """
        body = {"expected_head_sha": expected_head_sha} if expected_head_sha else None
        response = self.transport.request(
            "PUT", f"{repo_path(repo)}/pulls/{pr_number}/update-branch", body=body
        )
        return response.get("message", "Updating pull request branch.")
