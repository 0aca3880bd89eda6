"""mergegate async resource clients."""

from mergegate.async_clients.checks import AsyncChecksClient
from mergegate.async_clients.pulls import AsyncPullsClient
from mergegate.async_clients.repos import AsyncReposClient
from mergegate.async_clients.reviews import AsyncReviewsClient
from mergegate.async_clients.users import AsyncUsersClient

__all__ = [
    "AsyncReposClient",
    "AsyncPullsClient",
    "AsyncChecksClient",
    "AsyncReviewsClient",
    "AsyncUsersClient",
]
