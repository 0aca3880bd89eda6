"""Cursor background-agent data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AgentStatus:
    """Status of a Cursor background agent."""

    agent_id: str
    status: str  # "CREATING", "RUNNING", "FINISHED", "ERROR", "EXPIRED"
    name: str = ""
    pr_url: str | None = None
    branch_name: str | None = None
    repository: str | None = None
    summary: str | None = None
