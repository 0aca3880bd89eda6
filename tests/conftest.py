"""Shared fixtures for the mergegate test suite."""

from mergegate.testing.fixtures import (  # noqa: F401
    mock_client,
    mock_cursor,
    sample_pull_request,
    sample_settings,
)
