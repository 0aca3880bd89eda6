"""Response parsers shared by the sync and async resource clients.

Each parser validates a raw JSON payload once and returns a typed model;
missing or mistyped fields raise ValidationError.
"""

from typing import Any

from mergegate.exceptions import ValidationError
from mergegate.types.agents import AgentStatus
from mergegate.types.checks import CheckRun
from mergegate.types.pulls import MergeResponse, PullRequestStatus, Review, User
from mergegate.types.repos import RepositorySettings


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("MALFORMED_RESPONSE", f"Expected an object for {what}")
    return data


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    try:
        value = data[key]
    except KeyError:
        raise ValidationError(
            "MALFORMED_RESPONSE", f"Missing '{key}' in {what} response"
        ) from None
    if value is None:
        raise ValidationError("MALFORMED_RESPONSE", f"Null '{key}' in {what} response")
    return value


def parse_repository_settings(data: Any) -> RepositorySettings:
    """Parse ``GET /repos/{owner}/{repo}``."""
    data = _require_dict(data, "repository")
    return RepositorySettings(
        full_name=_require(data, "full_name", "repository"),
        allow_auto_merge=data.get("allow_auto_merge") is True,
        linear_history=(
            data.get("merge_commit_message") == "PR_TITLE"
            and data.get("merge_commit_title") == "PR_TITLE"
        ),
        allow_merge_commit=data.get("allow_merge_commit") is True,
        allow_rebase_merge=data.get("allow_rebase_merge") is True,
        allow_squash_merge=data.get("allow_squash_merge") is True,
    )


def parse_pull_request(data: Any) -> PullRequestStatus:
    """Parse a pull request object from ``GET /repos/{owner}/{repo}/pulls[/{n}]``."""
    data = _require_dict(data, "pull request")
    head = _require_dict(_require(data, "head", "pull request"), "pull request head")
    base = _require_dict(_require(data, "base", "pull request"), "pull request base")

    mergeable = data.get("mergeable")
    if mergeable is not None and not isinstance(mergeable, bool):
        raise ValidationError("MALFORMED_RESPONSE", "'mergeable' must be a boolean or null")

    return PullRequestStatus(
        number=int(_require(data, "number", "pull request")),
        mergeable=mergeable,
        mergeable_state=data.get("mergeable_state") or "unknown",
        head_sha=_require(head, "sha", "pull request head"),
        base_ref=_require(base, "ref", "pull request base"),
        head_ref=_require(head, "ref", "pull request head"),
        state=data.get("state", "open"),
        merged=data.get("merged") is True,
        title=data.get("title") or "",
        url=data.get("html_url") or "",
        node_id=data.get("node_id") or "",
        author=(data.get("user") or {}).get("login", ""),
    )


def parse_check_run(data: Any) -> CheckRun:
    """Parse one entry of ``check_runs``."""
    data = _require_dict(data, "check run")
    return CheckRun(
        name=_require(data, "name", "check run"),
        status=data.get("status") or "",
        conclusion=data.get("conclusion") or "",
        url=data.get("html_url") or "",
    )


def parse_review(data: Any) -> Review:
    """Parse one pull request review."""
    data = _require_dict(data, "review")
    return Review(
        review_id=int(_require(data, "id", "review")),
        user_login=(data.get("user") or {}).get("login", ""),
        state=_require(data, "state", "review"),
    )


def parse_user(data: Any) -> User:
    """Parse ``GET /user``."""
    data = _require_dict(data, "user")
    return User(login=_require(data, "login", "user"))


def parse_merge_response(data: Any) -> MergeResponse:
    """Parse ``PUT /repos/{owner}/{repo}/pulls/{n}/merge``."""
    data = _require_dict(data, "merge")
    return MergeResponse(
        merged=data.get("merged") is True,
        message=data.get("message") or "",
        sha=data.get("sha"),
    )


def parse_auto_merge_response(data: Any, method: str) -> MergeResponse:
    """Parse the ``enablePullRequestAutoMerge`` mutation payload."""
    data = _require_dict(data, "auto-merge")
    payload = _require_dict(
        _require(data, "enablePullRequestAutoMerge", "auto-merge"), "auto-merge payload"
    )
    pr = _require_dict(_require(payload, "pullRequest", "auto-merge"), "auto-merge pull request")
    return MergeResponse(
        merged=False,
        message=f"Auto-merge ({method}) enabled for PR #{pr.get('number', '?')}",
        auto_merge_enabled=pr.get("autoMergeRequest") is not None,
    )


def parse_agent_status(data: Any) -> AgentStatus:
    """Parse ``GET /v0/agents/{id}`` from the Cursor API."""
    data = _require_dict(data, "agent")
    target = data.get("target") or {}
    source = data.get("source") or {}
    return AgentStatus(
        agent_id=_require(data, "id", "agent"),
        status=data.get("status") or "",
        name=data.get("name") or "",
        pr_url=target.get("prUrl") or None,
        branch_name=target.get("branchName") or None,
        repository=source.get("repository") or None,
        summary=data.get("summary") or None,
    )
