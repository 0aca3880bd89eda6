"""
Approve, and optionally merge, a batch of pull requests.

Pull requests are processed one after another, never concurrently, to stay
clear of GitHub's secondary rate limits. Each PR succeeds or fails on its
own: a failure is recorded in ``BatchResult.errors`` and the next PR is
processed. Only an unusable token aborts the whole batch.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    MergeGateError,
    RequestTimeoutError,
)
from mergegate.gate import BLOCKED, AsyncMergeGate, MergeGate
from mergegate.logging import get_logger
from mergegate.types.checks import CIStatus
from mergegate.types.gate import MergeDecision, MergeResult
from mergegate.types.pulls import PullRequestStatus
from mergegate.types.repos import RepositorySettings
from mergegate.types.results import BatchError, BatchResult, PullRequestResult

if TYPE_CHECKING:
    from mergegate.async_client import AsyncGitHubClient
    from mergegate.client import GitHubClient

AUTH_WARNING = "GitHub token not authenticated - check GH_TOKEN or GITHUB_TOKEN"

logger = get_logger()


def approve_pull_requests(
    client: "GitHubClient",
    repo: str,
    pr_numbers: Sequence[int],
    merge: bool = False,
) -> BatchResult:
    """
    Approve each pull request and, if ``merge`` is set, run it through the merge gate.

    Args:
        client: GitHub client
        repo: Full repository name (``OWNER/REPO``)
        pr_numbers: Pull requests to process, in order
        merge: Merge after approving (auto-merge when allowed, direct merge otherwise)

    Returns:
        BatchResult with one entry per approved PR and one per error or block

    Raises:
        AuthenticationError: If the GitHub token cannot be used at all
    """
    user = client.check_auth()

    settings: RepositorySettings | None = None
    settings_error: MergeGateError | None = None
    if merge:
        try:
            settings = client.repos.get_settings(repo)
        except MergeGateError as e:
            logger.warning("Could not read repository settings for %s: %s", repo, e)
            settings_error = e

    batch = BatchResult(total=len(pr_numbers), repository_settings=settings)
    gate = MergeGate(client)

    for pr_number in pr_numbers:
        try:
            result = _approve_one(client, repo, pr_number, user.login)
        except MergeGateError as e:
            logger.error("%s#%s: approval failed: %s", repo, pr_number, e)
            batch.errors.append(BatchError(pr_number, e.message))
            continue
        batch.results.append(result)

        if not merge:
            continue
        if settings_error is not None:
            batch.errors.append(_settings_error(pr_number, settings_error))
            continue

        decision = pr_status = ci_status = None
        try:
            decision, pr_status, ci_status = gate.evaluate(repo, pr_number, settings)
            gate.execute(repo, pr_status, decision)
        except RequestTimeoutError as e:
            _record_timeout(batch, result, pr_number, e, pr_status, ci_status)
            continue
        except MergeGateError as e:
            logger.error("%s#%s: merge failed: %s", repo, pr_number, e)
            batch.errors.append(BatchError(pr_number, f"Merge validation failed: {e.message}"))
            continue
        _record_decision(batch, result, pr_number, decision, pr_status, ci_status)

    return batch


async def approve_pull_requests_async(
    client: "AsyncGitHubClient",
    repo: str,
    pr_numbers: Sequence[int],
    merge: bool = False,
) -> BatchResult:
    """
    Async twin of :func:`approve_pull_requests`.

    Each PR is awaited to completion before the next one starts.
    """
    user = await client.check_auth()

    settings: RepositorySettings | None = None
    settings_error: MergeGateError | None = None
    if merge:
        try:
            settings = await client.repos.get_settings(repo)
        except MergeGateError as e:
            logger.warning("Could not read repository settings for %s: %s", repo, e)
            settings_error = e

    batch = BatchResult(total=len(pr_numbers), repository_settings=settings)
    gate = AsyncMergeGate(client)

    for pr_number in pr_numbers:
        try:
            result = await _approve_one_async(client, repo, pr_number, user.login)
        except MergeGateError as e:
            logger.error("%s#%s: approval failed: %s", repo, pr_number, e)
            batch.errors.append(BatchError(pr_number, e.message))
            continue
        batch.results.append(result)

        if not merge:
            continue
        if settings_error is not None:
            batch.errors.append(_settings_error(pr_number, settings_error))
            continue

        decision = pr_status = ci_status = None
        try:
            decision, pr_status, ci_status = await gate.evaluate(repo, pr_number, settings)
            await gate.execute(repo, pr_status, decision)
        except RequestTimeoutError as e:
            _record_timeout(batch, result, pr_number, e, pr_status, ci_status)
            continue
        except MergeGateError as e:
            logger.error("%s#%s: merge failed: %s", repo, pr_number, e)
            batch.errors.append(BatchError(pr_number, f"Merge validation failed: {e.message}"))
            continue
        _record_decision(batch, result, pr_number, decision, pr_status, ci_status)

    return batch


def _approve_one(
    client: "GitHubClient", repo: str, pr_number: int, login: str
) -> PullRequestResult:
    already_approved = False
    auth_warning = None
    try:
        already_approved = client.reviews.has_approved(repo, pr_number, login)
    except (AuthenticationError, AuthorizationError) as e:
        logger.warning("%s#%s: could not read reviews: %s", repo, pr_number, e)
        auth_warning = AUTH_WARNING
    except MergeGateError as e:
        logger.warning("%s#%s: could not read reviews: %s", repo, pr_number, e)

    if already_approved:
        result = PullRequestResult(pr_number, True, "Already approved", skipped=True)
    else:
        client.reviews.approve(repo, pr_number)
        result = PullRequestResult(pr_number, True, "Approved")
    result.auth_warning = auth_warning
    return result


async def _approve_one_async(
    client: "AsyncGitHubClient", repo: str, pr_number: int, login: str
) -> PullRequestResult:
    already_approved = False
    auth_warning = None
    try:
        already_approved = await client.reviews.has_approved(repo, pr_number, login)
    except (AuthenticationError, AuthorizationError) as e:
        logger.warning("%s#%s: could not read reviews: %s", repo, pr_number, e)
        auth_warning = AUTH_WARNING
    except MergeGateError as e:
        logger.warning("%s#%s: could not read reviews: %s", repo, pr_number, e)

    if already_approved:
        result = PullRequestResult(pr_number, True, "Already approved", skipped=True)
    else:
        await client.reviews.approve(repo, pr_number)
        result = PullRequestResult(pr_number, True, "Approved")
    result.auth_warning = auth_warning
    return result


def _settings_error(pr_number: int, error: MergeGateError) -> BatchError:
    return BatchError(
        pr_number,
        f"Merge validation failed: repository settings unavailable: {error.message}",
    )


def _record_decision(
    batch: BatchResult,
    result: PullRequestResult,
    pr_number: int,
    decision: MergeDecision,
    pr_status: PullRequestStatus,
    ci_status: CIStatus,
) -> None:
    result.merge_result = MergeResult(
        strategy=decision.strategy,
        message=decision.message,
        ci_status=ci_status,
        pr_status=pr_status,
        merge_method=decision.merge_method,
    )
    if decision.blocked:
        batch.errors.append(
            BatchError(pr_number, f"Merge blocked: {decision.message}", ci_status, pr_status)
        )


def _record_timeout(
    batch: BatchResult,
    result: PullRequestResult,
    pr_number: int,
    error: RequestTimeoutError,
    pr_status: PullRequestStatus | None,
    ci_status: CIStatus | None,
) -> None:
    message = f"Timed out waiting for GitHub, retry later: {error.message}"
    logger.warning("PR #%s: %s", pr_number, message)
    result.merge_result = MergeResult(
        strategy=BLOCKED, message=message, ci_status=ci_status, pr_status=pr_status
    )
    batch.errors.append(BatchError(pr_number, f"Merge blocked: {message}", ci_status, pr_status))
