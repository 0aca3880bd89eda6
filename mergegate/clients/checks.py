"""Check-runs resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_check_run
from mergegate.types.checks import CheckRun
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.transport import HTTPTransport

PAGE_SIZE = 100


class ChecksClient:
    """Client for CI check-run queries."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list_for_ref(self, repo: str, sha: str) -> list[CheckRun]:
        """
        List every check-run reported against a commit.

        Follows pagination until ``total_count`` runs have been collected.

        Args:
            repo: Full repository name (``OWNER/REPO``)
            sha: Commit SHA

        Returns:
            List of CheckRun objects
        """
        runs: list[CheckRun] = []
        page = 1
        while True:
            response = self.transport.request(
                "GET",
                f"{repo_path(repo)}/commits/{sha}/check-runs",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            batch = response.get("check_runs", [])
            runs.extend(parse_check_run(run) for run in batch)
            total = response.get("total_count", len(runs))
            if not batch or len(runs) >= total:
                return runs
            page += 1
