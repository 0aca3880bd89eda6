"""Repository-related data models."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RepositorySettings:
    """Merge capabilities of a repository, fetched once per invocation."""

    full_name: str
    allow_auto_merge: bool
    linear_history: bool
    allow_merge_commit: bool
    allow_rebase_merge: bool
    allow_squash_merge: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullName": self.full_name,
            "allowAutoMerge": self.allow_auto_merge,
            "linearHistory": self.linear_history,
            "allowMergeCommit": self.allow_merge_commit,
            "allowRebaseMerge": self.allow_rebase_merge,
            "allowSquashMerge": self.allow_squash_merge,
        }
