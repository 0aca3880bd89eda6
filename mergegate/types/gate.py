"""Merge decision data models."""

from dataclasses import dataclass
from typing import Any

from mergegate.types.checks import CIStatus
from mergegate.types.pulls import PullRequestStatus


@dataclass(frozen=True)
class MergeDecision:
    """Outcome of the merge policy for one pull request."""

    strategy: str  # "auto-merge", "manual-merge", "blocked"
    message: str
    merge_method: str | None = None  # "merge", "rebase", "squash"; None means direct merge

    @property
    def blocked(self) -> bool:
        return self.strategy == "blocked"


@dataclass
class MergeResult:
    """Merge outcome attached to a pull request in a batch."""

    strategy: str
    message: str
    ci_status: CIStatus | None = None
    pr_status: PullRequestStatus | None = None
    merge_method: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "strategy": self.strategy,
            "message": self.message,
            "ciStatus": self.ci_status.to_dict() if self.ci_status else None,
            "prStatus": self.pr_status.to_dict() if self.pr_status else None,
        }
        if self.merge_method:
            data["mergeMethod"] = self.merge_method
        return data
