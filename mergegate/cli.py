"""
Command-line entry point.

    mergegate approve 12 15 [--repo owner/repo] [--merge]
    mergegate merge-agent bc-1234 [--follow-up-on-conflict]
    mergegate dependabot [--repo owner/repo] [--no-merge]

Results are printed to stdout as JSON. Exit status is 0 when every PR went
through, 1 when any PR errored or was blocked, 2 on configuration or
authentication failures.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

from mergegate.agent_merge import merge_agent_pull_request
from mergegate.approve import approve_pull_requests
from mergegate.client import GitHubClient
from mergegate.cursor import CursorClient
from mergegate.dependabot import approve_dependabot
from mergegate.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MergeGateError,
    RebaseError,
    ValidationError,
)
from mergegate.git import GitHelper
from mergegate.logging import configure_logging
from mergegate.types.results import BatchResult
from mergegate.urls import validate_repository

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mergegate",
        description="Approve and merge GitHub pull requests behind a CI gate.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP traffic")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Per-request timeout in seconds"
    )
    parser.add_argument(
        "--workspace",
        default=os.environ.get("MERGEGATE_WORKSPACE"),
        help="Checkout used to infer OWNER/REPO when --repo is omitted",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    approve = sub.add_parser("approve", help="Approve (and optionally merge) pull requests")
    approve.add_argument("prs", nargs="+", type=int, metavar="PR", help="PR numbers")
    approve.add_argument("--repo", help="OWNER/REPO")
    approve.add_argument(
        "--merge", action="store_true", help="Merge after approving"
    )

    agent = sub.add_parser("merge-agent", help="Rebase and merge a Cursor agent's PR")
    agent.add_argument("agent_id", help="Background agent id")
    agent.add_argument(
        "--follow-up-on-conflict",
        action="store_true",
        help="Ask the agent to resolve rebase conflicts",
    )

    dependabot = sub.add_parser("dependabot", help="Approve and merge open dependabot PRs")
    dependabot.add_argument("--repo", help="OWNER/REPO")
    dependabot.add_argument(
        "--no-merge", dest="merge", action="store_false", help="Only approve"
    )

    return parser


def resolve_repository(repo: str | None, workspace: str | None) -> str:
    if repo:
        try:
            return validate_repository(repo)
        except ValidationError as e:
            raise ConfigurationError(e.message) from e
    return GitHelper(workspace or os.getcwd()).infer_repository()


def _print_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def _report_batch(batch: BatchResult) -> int:
    for error in batch.errors:
        print(f"PR #{error.pr_number}: {error.error}", file=sys.stderr)
    _print_json(batch.to_dict())
    return EXIT_OK if batch.ok else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Args:
        argv: Command-line arguments (default: ``sys.argv[1:]``)

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)
    configure_logging(
        level=logging.INFO if args.verbose else logging.WARNING,
        http_level=logging.DEBUG if args.verbose else None,
    )

    try:
        if args.timeout is not None and args.timeout <= 0:
            raise ConfigurationError(f"--timeout must be positive, got {args.timeout}")

        if args.command == "merge-agent":
            with GitHubClient.from_env(timeout=args.timeout) as github, \
                    CursorClient.from_env(timeout=args.timeout) as cursor:
                outcome = merge_agent_pull_request(
                    github, cursor, args.agent_id, args.follow_up_on_conflict
                )
            if not outcome.success:
                print(outcome.message, file=sys.stderr)
            _print_json(outcome.to_dict())
            return EXIT_OK if outcome.success else EXIT_FAILED

        repo = resolve_repository(args.repo, args.workspace)
        with GitHubClient.from_env(timeout=args.timeout) as github:
            if args.command == "approve":
                batch = approve_pull_requests(github, repo, args.prs, merge=args.merge)
            else:
                batch = approve_dependabot(github, repo, merge=args.merge)
        return _report_batch(batch)

    except (ConfigurationError, AuthenticationError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_CONFIG
    except RebaseError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_FAILED
    except MergeGateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
