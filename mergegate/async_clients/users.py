"""Async users resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_user
from mergegate.types.pulls import User

if TYPE_CHECKING:
    from mergegate.async_transport import AsyncHTTPTransport


class AsyncUsersClient:
    """Async client for the authenticated user."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def current(self) -> User:
        return parse_user(await self.transport.request("GET", "/user"))
