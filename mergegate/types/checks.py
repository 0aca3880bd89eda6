"""CI check-run data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CheckRun:
    """A single CI job's reported status/conclusion against a commit."""

    name: str
    status: str  # "queued", "in_progress", "completed", ...
    conclusion: str  # "" while not completed
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "conclusion": self.conclusion,
            "url": self.url,
        }


@dataclass
class CIStatus:
    """Aggregate over all check-runs for a head commit."""

    overall: str  # "success", "pending", "failure", "no_checks"
    required: list[CheckRun] = field(default_factory=list)
    optional: list[CheckRun] = field(default_factory=list)
    still_running: list[CheckRun] = field(default_factory=list)
    errors: list[CheckRun] = field(default_factory=list)
    can_merge: bool = True
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "required": [c.to_dict() for c in self.required],
            "optional": [c.to_dict() for c in self.optional],
            "stillRunning": [c.to_dict() for c in self.still_running],
            "errors": [c.to_dict() for c in self.errors],
            "canMerge": self.can_merge,
            "message": self.message,
        }
