"""GitHub repository and pull request identifiers."""

import re

from mergegate.exceptions import ValidationError

_PR_URL_RE = re.compile(r"https://github\.com/([^/]+)/([^/]+)/pull/(\d+)")
_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


def parse_pull_request_url(pr_url: str) -> tuple[str, str, int]:
    """
    Split a GitHub pull request URL into ``(owner, repo, number)``.

    Raises:
        ValidationError: If the URL is not a GitHub pull request URL
    """
    match = _PR_URL_RE.match(pr_url)
    if not match:
        raise ValidationError("INVALID_PR_URL", f"Invalid GitHub PR URL: {pr_url}")
    return match.group(1), match.group(2), int(match.group(3))


def validate_repository(repo: str) -> str:
    """Return ``repo`` if it is a full ``OWNER/REPO`` name, else raise ValidationError."""
    if not _REPO_RE.match(repo):
        raise ValidationError(
            "INVALID_REPOSITORY", f"Repository must be OWNER/REPO, got: {repo!r}"
        )
    return repo


def repo_path(repo: str) -> str:
    """REST path prefix for a repository."""
    return f"/repos/{validate_repository(repo)}"
