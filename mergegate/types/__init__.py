"""mergegate type definitions.

This module exports all data model types used by the package.
"""

from mergegate.types.agents import AgentStatus
from mergegate.types.checks import CheckRun, CIStatus
from mergegate.types.gate import MergeDecision, MergeResult
from mergegate.types.pulls import MergeResponse, PullRequestStatus, Review, User
from mergegate.types.repos import RepositorySettings
from mergegate.types.results import (
    AgentMergeOutcome,
    BatchError,
    BatchResult,
    PullRequestResult,
)

__all__ = [
    # Repository types
    "RepositorySettings",
    # Pull request types
    "PullRequestStatus",
    "Review",
    "User",
    "MergeResponse",
    # CI types
    "CheckRun",
    "CIStatus",
    # Decision types
    "MergeDecision",
    "MergeResult",
    # Result types
    "PullRequestResult",
    "BatchError",
    "BatchResult",
    "AgentMergeOutcome",
    # Cursor agent types
    "AgentStatus",
]
