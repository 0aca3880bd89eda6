"""Users resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_user
from mergegate.types.pulls import User

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport


class UsersClient:
    """Client for the authenticated user."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def current(self) -> User:
        """
        Get the user the token belongs to.

        Raises:
            AuthenticationError: If the token is missing or invalid
        """
        return parse_user(self.transport.request("GET", "/user"))
