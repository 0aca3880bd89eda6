"""mergegate testing utilities.

Provides mock clients and factories for testing code built on mergegate.
"""

from mergegate.testing.fixtures import (
    create_agent_status,
    create_check_run,
    create_pull_request_status,
    create_repository_settings,
)
from mergegate.testing.mock import MockCall, MockCursorClient, MockGitHubClient, MockResponse

__all__ = [
    # Mock clients
    "MockGitHubClient",
    "MockCursorClient",
    "MockCall",
    "MockResponse",
    # Factories
    "create_repository_settings",
    "create_pull_request_status",
    "create_check_run",
    "create_agent_status",
]
