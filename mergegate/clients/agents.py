"""Cursor background-agents resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_agent_status
from mergegate.types.agents import AgentStatus

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport


class AgentsClient:
    """Client for Cursor background-agent operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the agents client.

        Args:
            transport: HTTP transport bound to the Cursor API
        """
        self.transport = transport

    def get(self, agent_id: str) -> AgentStatus:
        """
        Get the current status and results of an agent.

        Returns:
            AgentStatus; ``pr_url`` is set once the agent opened a pull request

        Raises:
            NotFoundError: If the agent does not exist
        """
        response = self.transport.request("GET", f"/v0/agents/{agent_id}")
        return parse_agent_status(response)

    def add_follow_up(self, agent_id: str, text: str) -> str:
        """
        Send a follow-up instruction to a running or finished agent.

        Returns:
            The agent id echoed by the API
        """
        response = self.transport.request(
            "POST",
            f"/v0/agents/{agent_id}/followup",
            body={"prompt": {"text": text}},
        )
        return response.get("id", agent_id)
