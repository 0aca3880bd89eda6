"""mergegate resource clients."""

from mergegate.clients.agents import AgentsClient
from mergegate.clients.checks import ChecksClient
from mergegate.clients.pulls import PullsClient
from mergegate.clients.repos import ReposClient
from mergegate.clients.reviews import ReviewsClient
from mergegate.clients.users import UsersClient

__all__ = [
    "ReposClient",
    "PullsClient",
    "ChecksClient",
    "ReviewsClient",
    "UsersClient",
    "AgentsClient",
]
