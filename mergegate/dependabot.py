"""Approve and merge every open dependabot pull request in a repository."""

from typing import TYPE_CHECKING

from mergegate.approve import approve_pull_requests
from mergegate.logging import get_logger
from mergegate.types.pulls import PullRequestStatus
from mergegate.types.results import BatchResult

if TYPE_CHECKING:
    from mergegate.client import GitHubClient

DEPENDABOT_LOGINS = frozenset({"dependabot[bot]", "app/dependabot", "dependabot"})

logger = get_logger()


def is_dependabot(pr: PullRequestStatus) -> bool:
    return pr.author in DEPENDABOT_LOGINS


def dependabot_pull_requests(client: "GitHubClient", repo: str, limit: int = 100) -> list[int]:
    """Numbers of open pull requests authored by dependabot, newest first."""
    numbers = [pr.number for pr in client.pulls.list_open(repo, limit) if is_dependabot(pr)]
    logger.info("%s: %d open dependabot PR(s)", repo, len(numbers))
    return numbers


def approve_dependabot(client: "GitHubClient", repo: str, merge: bool = True) -> BatchResult:
    """
    Run every open dependabot PR through the approve/merge batch.

    Returns an empty batch when there is nothing to do.
    """
    numbers = dependabot_pull_requests(client, repo)
    if not numbers:
        return BatchResult(total=0)
    return approve_pull_requests(client, repo, numbers, merge=merge)
