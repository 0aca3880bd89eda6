"""
The merge gate.

``decide`` is a pure function of repository settings and CI status; it picks
one of three strategies:

- ``auto-merge``: let GitHub merge once requirements are met
- ``manual-merge``: merge directly now
- ``blocked``: do nothing and report why

Rules are evaluated in order and the first match wins. Linear history is
checked before CI is consulted at all. A CI failure still auto-merges when at
least one check passed and auto-merge is allowed; GitHub's branch protection
then decides whether the failing checks are required.

``MergeGate`` collects the inputs from GitHub and executes a decision.
"""

from typing import TYPE_CHECKING

from mergegate.ci import aggregate_check_runs, check_names
from mergegate.logging import get_logger, log_decision
from mergegate.types.checks import CIStatus
from mergegate.types.gate import MergeDecision
from mergegate.types.pulls import MergeResponse, PullRequestStatus
from mergegate.types.repos import RepositorySettings

if TYPE_CHECKING:
    from mergegate.async_client import AsyncGitHubClient
    from mergegate.client import GitHubClient

AUTO_MERGE = "auto-merge"
MANUAL_MERGE = "manual-merge"
BLOCKED = "blocked"

# States in which GitHub merges at once and refuses to enable auto-merge.
MERGEABLE_NOW = frozenset({"clean", "unstable", "has_hooks"})

logger = get_logger("gate")

_NO_SETTINGS = RepositorySettings(
    full_name="",
    allow_auto_merge=False,
    linear_history=False,
    allow_merge_commit=False,
    allow_rebase_merge=False,
    allow_squash_merge=False,
)


def select_merge_method(settings: RepositorySettings | None) -> str | None:
    """
    Pick the auto-merge method the repository allows.

    Precedence is merge commit, then rebase, then squash. ``None`` means no
    method is enabled and the caller falls back to a direct merge.
    """
    if settings is None:
        return None
    if settings.allow_merge_commit:
        return "merge"
    if settings.allow_rebase_merge:
        return "rebase"
    if settings.allow_squash_merge:
        return "squash"
    return None


def decide(settings: RepositorySettings | None, ci_status: CIStatus) -> MergeDecision:
    """
    Apply the merge policy.

    Args:
        settings: Repository merge settings; ``None`` behaves as every flag off
        ci_status: Aggregated check-runs for the PR head

    Returns:
        MergeDecision; auto-merge decisions carry the selected merge method
    """
    repo = settings or _NO_SETTINGS
    auto = repo.allow_auto_merge

    if repo.linear_history:
        if auto:
            return _auto(settings, "Linear history required - using auto-merge")
        return MergeDecision(
            BLOCKED, "Linear history required but auto-merge disabled. Rebase required."
        )

    overall = ci_status.overall
    if overall == "success":
        message = "All checks passed - proceeding with merge"
        return _auto(settings, message) if auto else MergeDecision(MANUAL_MERGE, message)

    if overall == "pending":
        waiting = check_names(ci_status.still_running)
        if auto:
            return _auto(settings, f"CI still running - auto-merge will complete after: {waiting}")
        return MergeDecision(BLOCKED, f"CI still running - manual merge blocked. Waiting for: {waiting}")

    if overall == "failure":
        failing = check_names(ci_status.errors)
        # TODO: read branch protection's required contexts and block when a
        # failing check is one of them.
        if ci_status.required and auto:
            return _auto(
                settings,
                f"CI has failures but required checks exist - auto-merge will proceed. Errors: {failing}",
            )
        return MergeDecision(BLOCKED, f"CI failed - merge blocked. Errors: {failing}")

    message = "No CI checks found - proceeding with merge"
    return _auto(settings, message) if auto else MergeDecision(MANUAL_MERGE, message)


def _auto(settings: RepositorySettings | None, message: str) -> MergeDecision:
    return MergeDecision(AUTO_MERGE, message, select_merge_method(settings))


class MergeGate:
    """Collects merge inputs from GitHub and executes decisions."""

    def __init__(self, client: "GitHubClient") -> None:
        self.client = client

    def evaluate(
        self,
        repo: str,
        pr_number: int,
        settings: RepositorySettings | None,
    ) -> tuple[MergeDecision, PullRequestStatus, CIStatus]:
        """
        Fetch PR status, then the check-runs for its head, and decide.

        The calls are sequential: check-runs are keyed by the head SHA.
        """
        pr_status = self.client.pulls.get(repo, pr_number)
        check_runs = self.client.checks.list_for_ref(repo, pr_status.head_sha)
        ci_status = aggregate_check_runs(check_runs)
        decision = decide(settings, ci_status)
        log_decision(repo, pr_number, decision)
        return decision, pr_status, ci_status

    def execute(
        self, repo: str, pr_status: PullRequestStatus, decision: MergeDecision
    ) -> MergeResponse | None:
        """
        Carry out a decision.

        Returns ``None`` for blocked decisions. Auto-merge on a PR that is
        already mergeable (see ``MERGEABLE_NOW``) merges directly with the
        selected method.
        """
        if decision.blocked:
            return None

        number = pr_status.number
        if decision.strategy == AUTO_MERGE and decision.merge_method:
            if pr_status.mergeable_state in MERGEABLE_NOW:
                logger.info("%s#%s is mergeable; merging now (%s)", repo, number, decision.merge_method)
                return self.client.pulls.merge(repo, number, decision.merge_method)
            logger.info("%s#%s: enabling auto-merge (%s)", repo, number, decision.merge_method)
            return self.client.pulls.enable_auto_merge(pr_status, decision.merge_method)

        logger.info("%s#%s: merging directly", repo, number)
        return self.client.pulls.merge(repo, number, "merge")


class AsyncMergeGate:
    """Async twin of :class:`MergeGate`."""

    def __init__(self, client: "AsyncGitHubClient") -> None:
        self.client = client

    async def evaluate(
        self,
        repo: str,
        pr_number: int,
        settings: RepositorySettings | None,
    ) -> tuple[MergeDecision, PullRequestStatus, CIStatus]:
        pr_status = await self.client.pulls.get(repo, pr_number)
        check_runs = await self.client.checks.list_for_ref(repo, pr_status.head_sha)
        ci_status = aggregate_check_runs(check_runs)
        decision = decide(settings, ci_status)
        log_decision(repo, pr_number, decision)
        return decision, pr_status, ci_status

    async def execute(
        self, repo: str, pr_status: PullRequestStatus, decision: MergeDecision
    ) -> MergeResponse | None:
        if decision.blocked:
            return None

        number = pr_status.number
        if decision.strategy == AUTO_MERGE and decision.merge_method:
            if pr_status.mergeable_state in MERGEABLE_NOW:
                return await self.client.pulls.merge(repo, number, decision.merge_method)
            return await self.client.pulls.enable_auto_merge(pr_status, decision.merge_method)

        return await self.client.pulls.merge(repo, number, "merge")
