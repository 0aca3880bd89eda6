"""Pull request-related data models."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PullRequestStatus:
    """Live pull request state as computed by GitHub.

    ``mergeable`` is ``None`` while GitHub is still computing mergeability.
    """

    number: int
    mergeable: bool | None
    mergeable_state: str  # "clean", "blocked", "behind", "dirty", "unstable", "unknown", ...
    head_sha: str
    base_ref: str
    head_ref: str
    state: str = "open"  # "open" or "closed"
    merged: bool = False
    title: str = ""
    url: str = ""
    node_id: str = ""
    author: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "mergeable": self.mergeable,
            "mergeableState": self.mergeable_state,
            "headSha": self.head_sha,
            "baseRef": self.base_ref,
            "headRef": self.head_ref,
            "state": self.state,
            "merged": self.merged,
            "title": self.title,
            "url": self.url,
        }


@dataclass(frozen=True)
class Review:
    """Pull request review."""

    review_id: int
    user_login: str
    state: str  # "APPROVED", "CHANGES_REQUESTED", "COMMENTED", "DISMISSED", "PENDING"


@dataclass(frozen=True)
class User:
    """Authenticated GitHub user."""

    login: str


@dataclass(frozen=True)
class MergeResponse:
    """Outcome of a direct merge or an auto-merge request."""

    merged: bool
    message: str
    sha: str | None = None
    auto_merge_enabled: bool = False
