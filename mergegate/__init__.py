"""mergegate - approve and merge GitHub pull requests behind a CI gate."""

from mergegate.agent_merge import merge_agent_pull_request
from mergegate.approve import approve_pull_requests, approve_pull_requests_async
from mergegate.async_client import AsyncGitHubClient
from mergegate.ci import aggregate_check_runs
from mergegate.client import GitHubClient
from mergegate.cursor import CursorClient
from mergegate.dependabot import approve_dependabot
from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    MergeGateError,
    NotFoundError,
    RateLimitedError,
    RebaseError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from mergegate.gate import AsyncMergeGate, MergeGate, decide, select_merge_method
from mergegate.logging import configure_logging, get_logger
from mergegate.transport import HTTPTransport, RetryConfig

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Clients
    "GitHubClient",
    "AsyncGitHubClient",
    "CursorClient",
    # Merge gate
    "aggregate_check_runs",
    "decide",
    "select_merge_method",
    "MergeGate",
    "AsyncMergeGate",
    # Workflows
    "approve_pull_requests",
    "approve_pull_requests_async",
    "merge_agent_pull_request",
    "approve_dependabot",
    # Exceptions
    "MergeGateError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "RequestTimeoutError",
    "RebaseError",
    "ConfigurationError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
