"""Batch and agent-merge result models.

``to_dict`` produces the JSON shape printed by the CLI.
"""

from dataclasses import dataclass, field
from typing import Any

from mergegate.types.checks import CIStatus
from mergegate.types.gate import MergeDecision, MergeResult
from mergegate.types.pulls import PullRequestStatus
from mergegate.types.repos import RepositorySettings


@dataclass
class PullRequestResult:
    """Approval (and optional merge) outcome for one pull request."""

    pr_number: int
    success: bool
    output: str
    skipped: bool = False
    auth_warning: str | None = None
    merge_result: MergeResult | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "prNumber": self.pr_number,
            "output": self.output,
        }
        if self.skipped:
            data["skipped"] = True
        if self.auth_warning:
            data["authWarning"] = self.auth_warning
        if self.merge_result is not None:
            data["mergeResult"] = self.merge_result.to_dict()
        return data


@dataclass
class BatchError:
    """A per-PR failure or policy block recorded in a batch."""

    pr_number: int
    error: str
    ci_status: CIStatus | None = None
    pr_status: PullRequestStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"prNumber": self.pr_number, "error": self.error}
        if self.ci_status is not None:
            data["ciStatus"] = self.ci_status.to_dict()
        if self.pr_status is not None:
            data["prStatus"] = self.pr_status.to_dict()
        return data


@dataclass
class BatchResult:
    """Aggregate result of approving a list of pull requests."""

    total: int
    repository_settings: RepositorySettings | None = None
    results: list[PullRequestResult] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        """True when no PR errored or was blocked."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "repositorySettings": (
                self.repository_settings.to_dict() if self.repository_settings else None
            ),
            "results": [r.to_dict() for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class AgentMergeOutcome:
    """Result of merging the pull request opened by a Cursor agent."""

    success: bool
    message: str
    agent_id: str
    pr_status: PullRequestStatus | None = None
    repository_settings: RepositorySettings | None = None
    rebase_error: str | None = None
    decision: MergeDecision | None = None
    ci_status: CIStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "agentId": self.agent_id,
        }
        if self.pr_status is not None:
            data["prStatus"] = self.pr_status.to_dict()
        if self.repository_settings is not None:
            data["repositorySettings"] = self.repository_settings.to_dict()
        if self.rebase_error is not None:
            data["rebaseError"] = self.rebase_error
        if self.decision is not None:
            data["decision"] = {
                "strategy": self.decision.strategy,
                "message": self.decision.message,
                "mergeMethod": self.decision.merge_method,
            }
        if self.ci_status is not None:
            data["ciStatus"] = self.ci_status.to_dict()
        return data
