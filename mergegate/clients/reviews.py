"""Pull request reviews resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_review
from mergegate.types.pulls import Review
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport

PAGE_SIZE = 100


class ReviewsClient:
    """Client for pull request review operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the reviews client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def approve(self, repo: str, pr_number: int, body: str | None = None) -> Review:
        """
        Submit an approving review.

        GitHub refuses approvals from the pull request author.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            pr_number: Pull request number
            body: Optional review comment

        Returns:
            The created Review

        Raises:
            ValidationError: If self-approval attempted
            NotFoundError: If pull request not found
        """
        request_body: dict[str, str] = {"event": "APPROVE"}
        if body:
            request_body["body"] = body

        response = self.transport.request(
            "POST",
            f"{repo_path(repo)}/pulls/{pr_number}/reviews",
            body=request_body,
        )
        return parse_review(response)

    def list(self, repo: str, pr_number: int) -> list[Review]:
        """
        List every review on a pull request, following pagination.

        Raises:
            NotFoundError: If pull request not found
        """
        reviews: list[Review] = []
        page = 1
        while True:
            response = self.transport.request(
                "GET",
                f"{repo_path(repo)}/pulls/{pr_number}/reviews",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            reviews.extend(parse_review(review) for review in response)
            if len(response) < PAGE_SIZE:
                return reviews
            page += 1

    def has_approved(self, repo: str, pr_number: int, login: str) -> bool:
        """True if ``login`` has an ``APPROVED`` review on the pull request."""
        return any(
            review.user_login == login and review.state == "APPROVED"
            for review in self.list(repo, pr_number)
        )
