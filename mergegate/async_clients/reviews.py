"""Async pull request reviews resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_review
from mergegate.clients.reviews import PAGE_SIZE
from mergegate.types.pulls import Review
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.async_transport import AsyncHTTPTransport


class AsyncReviewsClient:
    """Async client for pull request review operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def approve(self, repo: str, pr_number: int, body: str | None = None) -> Review:
        """Submit an approving review."""
        request_body: dict[str, str] = {"event": "APPROVE"}
        if body:
            request_body["body"] = body

        response = await self.transport.request(
            "POST",
            f"{repo_path(repo)}/pulls/{pr_number}/reviews",
            body=request_body,
        )
        return parse_review(response)

    async def list(self, repo: str, pr_number: int) -> list[Review]:
        """List every review on a pull request, following pagination."""
        reviews: list[Review] = []
        page = 1
        while True:
            response = await self.transport.request(
                "GET",
                f"{repo_path(repo)}/pulls/{pr_number}/reviews",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            reviews.extend(parse_review(review) for review in response)
            if len(response) < PAGE_SIZE:
                return reviews
            page += 1

    async def has_approved(self, repo: str, pr_number: int, login: str) -> bool:
        reviews = await self.list(repo, pr_number)
        return any(r.user_login == login and r.state == "APPROVED" for r in reviews)
