"""
Merge the pull request opened by a Cursor background agent.

The PR branch is always brought up to date with its base before the merge
gate runs, so the gate never judges an out-of-date head. Conflicts stop the
merge and point the caller at a follow-up asking the agent to resolve them.
"""

import time
from typing import TYPE_CHECKING

from mergegate.exceptions import MergeGateError, RebaseError
from mergegate.gate import MergeGate
from mergegate.logging import get_logger
from mergegate.types.pulls import PullRequestStatus
from mergegate.types.results import AgentMergeOutcome
from mergegate.urls import parse_pull_request_url

if TYPE_CHECKING:
    from mergegate.client import GitHubClient
    from mergegate.cursor import CursorClient

logger = get_logger()


def is_conflict(message: str) -> bool:
    """True if a branch-update error reports merge conflicts."""
    return "conflict" in message.lower()


def is_up_to_date(message: str) -> bool:
    """True if a branch-update error says the base has nothing new."""
    return "no new commits" in message.lower()


def wait_for_new_head(
    github: "GitHubClient",
    repo: str,
    pr_number: int,
    old_sha: str,
    timeout: float,
    interval: float,
) -> bool:
    """Poll the pull request until its head moves off ``old_sha``."""
    attempts = max(1, int(timeout / interval)) if interval > 0 else 1
    for attempt in range(attempts):
        if github.pulls.get(repo, pr_number).head_sha != old_sha:
            return True
        if attempt < attempts - 1:
            time.sleep(interval)
    return False


def conflict_follow_up(pr_status: PullRequestStatus) -> str:
    """Instruction for the agent to resolve a failed rebase."""
    return (
        f"Resolve the conflicts of rebasing `{pr_status.head_ref}` onto `{pr_status.base_ref}`. "
        f"Confirm it's in working order, then force push `{pr_status.head_ref}`."
    )


def merge_agent_pull_request(
    github: "GitHubClient",
    cursor: "CursorClient",
    agent_id: str,
    follow_up_on_conflict: bool = False,
    head_timeout: float = 60.0,
    poll_interval: float = 2.0,
) -> AgentMergeOutcome:
    """
    Rebase and merge the pull request an agent produced.

    Args:
        github: GitHub client
        cursor: Cursor API client
        agent_id: Background agent id
        follow_up_on_conflict: Send the conflict-resolution follow-up to the
            agent instead of only recommending it
        head_timeout: Seconds to wait for the updated head to show up
        poll_interval: Seconds between pull request polls while waiting

    Returns:
        AgentMergeOutcome; ``success`` is false when there is nothing to merge,
        the PR is closed, the rebase conflicts, the updated head never shows
        up, or the gate blocks

    Raises:
        AuthenticationError: If the GitHub token cannot be used
        RebaseError: If the branch update fails for a reason other than conflicts
    """
    agent = cursor.agents.get(agent_id)
    if not agent.pr_url:
        return AgentMergeOutcome(False, "No changes made, nothing to PR.", agent_id)

    github.check_auth()

    owner, name, pr_number = parse_pull_request_url(agent.pr_url)
    repo = f"{owner}/{name}"
    pr_status = github.pulls.get(repo, pr_number)

    if pr_status.merged:
        return AgentMergeOutcome(
            False, "This PR has already been merged.", agent_id, pr_status=pr_status
        )
    if pr_status.state != "open":
        return AgentMergeOutcome(
            False, "This PR has been canceled.", agent_id, pr_status=pr_status
        )

    settings = github.repos.get_settings(repo)

    updated = True
    try:
        github.pulls.update_branch(repo, pr_number, expected_head_sha=pr_status.head_sha)
    except MergeGateError as e:
        if is_up_to_date(e.message):
            logger.info("%s#%s is already up to date with %s", repo, pr_number, pr_status.base_ref)
            updated = False
        elif is_conflict(e.message):
            follow_up = conflict_follow_up(pr_status)
            message = (
                f"Cannot rebase to `{pr_status.base_ref}` due to conflicts. "
                f"Recommended course of action is to use a follow-up asking the agent to \"{follow_up}\""
            )
            if follow_up_on_conflict:
                cursor.agents.add_follow_up(agent_id, follow_up)
                message = (
                    f"Cannot rebase to `{pr_status.base_ref}` due to conflicts. "
                    "Asked the agent to resolve them."
                )
            logger.warning("%s#%s: rebase conflicts: %s", repo, pr_number, e.message)
            return AgentMergeOutcome(
                False,
                message,
                agent_id,
                pr_status=pr_status,
                repository_settings=settings,
                rebase_error=e.message,
            )
        else:
            raise RebaseError(f"Rebase failed: {e.message}") from e

    # update-branch only schedules the update (202); wait for the new head.
    if updated and not wait_for_new_head(
        github, repo, pr_number, pr_status.head_sha, head_timeout, poll_interval
    ):
        logger.warning("%s#%s: head still at %s after branch update", repo, pr_number,
                       pr_status.head_sha)
        return AgentMergeOutcome(
            False,
            f"Branch update for PR #{pr_number} has not reached GitHub yet; retry later.",
            agent_id,
            pr_status=pr_status,
            repository_settings=settings,
        )

    gate = MergeGate(github)
    decision, pr_status, ci_status = gate.evaluate(repo, pr_number, settings)
    if decision.blocked:
        return AgentMergeOutcome(
            False,
            f"Merge blocked: {decision.message}",
            agent_id,
            pr_status=pr_status,
            repository_settings=settings,
            decision=decision,
            ci_status=ci_status,
        )

    gate.execute(repo, pr_status, decision)
    verb = "auto-merged" if decision.strategy == "auto-merge" else "merged"
    return AgentMergeOutcome(
        True,
        f"Successfully {verb} PR #{pr_number}",
        agent_id,
        pr_status=pr_status,
        repository_settings=settings,
        decision=decision,
        ci_status=ci_status,
    )
