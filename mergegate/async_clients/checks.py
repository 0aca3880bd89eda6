"""Async check-runs resource client."""

from typing import TYPE_CHECKING

from mergegate.clients._parsing import parse_check_run
from mergegate.clients.checks import PAGE_SIZE
from mergegate.types.checks import CheckRun
from mergegate.urls import repo_path

if TYPE_CHECKING:
    from mergegate.async_transport import AsyncHTTPTransport


class AsyncChecksClient:
    """Async client for CI check-run queries."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list_for_ref(self, repo: str, sha: str) -> list[CheckRun]:
        """List every check-run reported against a commit, following pagination."""
        runs: list[CheckRun] = []
        page = 1
        while True:
            response = await self.transport.request(
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
