"""
Pytest plugin exposing the mergegate fixtures.

Add this to a top-level conftest.py:

    pytest_plugins = ["mergegate.testing.conftest"]
"""

from mergegate.testing.fixtures import (
    mock_client,
    mock_cursor,
    sample_pull_request,
    sample_settings,
)

__all__ = [
    "mock_client",
    "mock_cursor",
    "sample_settings",
    "sample_pull_request",
]
