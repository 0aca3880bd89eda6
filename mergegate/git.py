"""
Git helper utilities for mergegate.

Infers the GitHub repository of a local checkout so callers may omit
``OWNER/REPO``. The workspace directory is always passed in explicitly.
"""

import re
import subprocess
from pathlib import Path

from mergegate.exceptions import ConfigurationError

_GITHUB_REMOTE_RE = re.compile(
    r"^(?:https://(?:[^@/]+@)?github\.com/|git@github\.com:|ssh://git@github\.com/)"
    r"([^/]+)/([^/]+?)(?:\.git)?/?$"
)


def parse_remote_url(url: str) -> str | None:
    """
    Return ``OWNER/REPO`` for a GitHub remote URL, or ``None`` for other hosts.

    Recognises HTTPS (optionally with credentials), scp-style SSH and
    ``ssh://`` remotes.
    """
    match = _GITHUB_REMOTE_RE.match(url.strip())
    if not match:
        return None
    return f"{match.group(1)}/{match.group(2)}"


class GitHelper:
    """
    Read-only git queries against a workspace directory.

    Example:
        ```python
        from mergegate.git import GitHelper

        repo = GitHelper("~/src/app").infer_repository()  # "octo/app"
        ```
    """

    def __init__(self, workspace: str | Path) -> None:
        """
        Args:
            workspace: Directory inside a git checkout
        """
        self.workspace = Path(workspace).expanduser()

    def remote_url(self, remote: str = "origin") -> str:
        """
        Get the URL of a remote.

        Raises:
            ConfigurationError: If git is missing or the remote does not exist
        """
        cmd = ["git", "-C", str(self.workspace), "remote", "get-url", remote]
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError:
            raise ConfigurationError("git executable not found") from None
        except subprocess.CalledProcessError as e:
            raise ConfigurationError(
                f"Cannot read remote {remote!r} in {self.workspace}: {e.stderr.strip()}"
            ) from e
        return result.stdout.strip()

    def infer_repository(self, remote: str = "origin") -> str:
        """
        Get ``OWNER/REPO`` from a GitHub remote.

        Raises:
            ConfigurationError: If the remote is missing or not on github.com
        """
        url = self.remote_url(remote)
        repo = parse_remote_url(url)
        if repo is None:
            raise ConfigurationError(
                f"Remote {remote!r} is not a GitHub repository: {url}; pass OWNER/REPO explicitly"
            )
        return repo
