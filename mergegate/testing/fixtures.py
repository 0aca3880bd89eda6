"""
Pytest fixtures and factories for mergegate tests.
"""

from collections.abc import Generator
from typing import Any

import pytest

from mergegate.testing.mock import MockCursorClient, MockGitHubClient
from mergegate.types.agents import AgentStatus
from mergegate.types.checks import CheckRun
from mergegate.types.pulls import PullRequestStatus
from mergegate.types.repos import RepositorySettings


# ============================================================================
# Factories
# ============================================================================


def create_repository_settings(
    full_name: str = "octo/app",
    **kwargs: Any,
) -> RepositorySettings:
    """
    Create RepositorySettings; every flag defaults to off except merge commits.

    Args:
        full_name: Repository name
        **kwargs: Fields to override
    """
    defaults = {
        "allow_auto_merge": False,
        "linear_history": False,
        "allow_merge_commit": True,
        "allow_rebase_merge": False,
        "allow_squash_merge": False,
    }
    defaults.update(kwargs)
    return RepositorySettings(full_name=full_name, **defaults)


def create_pull_request_status(number: int = 1, **kwargs: Any) -> PullRequestStatus:
    """Create an open, mergeable PullRequestStatus with customizable fields."""
    defaults = {
        "mergeable": True,
        "mergeable_state": "blocked",
        "head_sha": f"abc{number:04d}",
        "base_ref": "main",
        "head_ref": f"feature/{number}",
        "state": "open",
        "merged": False,
        "title": f"Change #{number}",
        "url": f"https://github.com/octo/app/pull/{number}",
        "node_id": f"PR_kw{number}",
        "author": "octocat",
    }
    defaults.update(kwargs)
    return PullRequestStatus(number=number, **defaults)


def create_check_run(
    name: str = "build",
    status: str = "completed",
    conclusion: str = "success",
) -> CheckRun:
    """Create a CheckRun; completed and successful by default."""
    return CheckRun(
        name=name,
        status=status,
        conclusion=conclusion,
        url=f"https://github.com/octo/app/runs/{name}",
    )


def create_agent_status(
    agent_id: str = "bc-test",
    pr_url: str | None = "https://github.com/octo/app/pull/7",
    **kwargs: Any,
) -> AgentStatus:
    """Create a finished AgentStatus that opened ``pr_url``."""
    defaults = {
        "status": "FINISHED",
        "name": "Fix the build",
        "branch_name": "cursor/fix-build",
        "repository": "github.com/octo/app",
        "summary": None,
    }
    defaults.update(kwargs)
    return AgentStatus(agent_id=agent_id, pr_url=pr_url, **defaults)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockGitHubClient, None, None]:
    """Provide a MockGitHubClient for testing."""
    client = MockGitHubClient(login="test-user")
    yield client
    client.reset()


@pytest.fixture
def mock_cursor(mock_client: MockGitHubClient) -> MockCursorClient:
    """Provide a MockCursorClient sharing ``mock_client``'s call log."""
    return MockCursorClient(mock_client)


@pytest.fixture
def sample_settings() -> RepositorySettings:
    """Repository allowing auto-merge with merge commits."""
    return create_repository_settings(allow_auto_merge=True)


@pytest.fixture
def sample_pull_request() -> PullRequestStatus:
    return create_pull_request_status(42)


__all__ = [
    "mock_client",
    "mock_cursor",
    "sample_settings",
    "sample_pull_request",
    "create_repository_settings",
    "create_pull_request_status",
    "create_check_run",
    "create_agent_status",
]
