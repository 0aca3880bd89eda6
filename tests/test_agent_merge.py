"""
Tests for merging a Cursor agent's pull request.
"""

from unittest.mock import patch

import pytest

from mergegate.agent_merge import (
    conflict_follow_up,
    is_conflict,
    is_up_to_date,
    merge_agent_pull_request,
)
from mergegate.exceptions import AuthenticationError, RebaseError, ServerError, ValidationError
from mergegate.testing import (
    MockCursorClient,
    MockGitHubClient,
    create_agent_status,
    create_check_run,
    create_pull_request_status,
    create_repository_settings,
)

CONFLICT = ValidationError("VALIDATION_FAILED", "merge conflict between base and head")
UP_TO_DATE = ValidationError("VALIDATION_FAILED", "There are no new commits on the base branch.")


@pytest.fixture
def agent_pr(mock_client: MockGitHubClient, mock_cursor: MockCursorClient):
    mock_cursor.agents.configure("get", response=create_agent_status("bc-1"))

    def get(repo: str, pr_number: int):
        rebased = mock_client.was_called("pulls.update_branch")
        return create_pull_request_status(
            7,
            head_sha="rebased7" if rebased else "abc0007",
            head_ref="cursor/fix-build",
            base_ref="main",
        )

    mock_client.pulls.configure("get", handler=get)
    return get("octo/app", 7)


def test_is_conflict() -> None:
    assert is_conflict("Merge CONFLICT between base and head")
    assert not is_conflict("Head branch was modified")


def test_is_up_to_date() -> None:
    assert is_up_to_date("There are no new commits on the base branch.")
    assert not is_up_to_date("merge conflict between base and head")


def test_conflict_follow_up_names_both_branches(sample_pull_request) -> None:
    text = conflict_follow_up(sample_pull_request)

    assert f"`{sample_pull_request.head_ref}`" in text
    assert f"`{sample_pull_request.base_ref}`" in text
    assert "force push" in text


class TestMergeAgentPullRequest:
    def test_success_rebases_before_the_gate(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.success
        assert outcome.message == "Successfully merged PR #7"
        assert mock_client.call_order() == [
            "agents.get",
            "users.current",
            "pulls.get",
            "repos.get_settings",
            "pulls.update_branch",
            "pulls.get",
            "pulls.get",
            "checks.list_for_ref",
            "pulls.merge",
        ]
        assert mock_client.get_calls("pulls.update_branch")[0].args == ("octo/app", 7, "abc0007")
        assert mock_client.get_calls("checks.list_for_ref")[0].args == ("octo/app", "rebased7")
        assert outcome.pr_status.head_sha == "rebased7"

    def test_auto_merge_message(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.repos.configure(
            "get_settings", response=create_repository_settings(allow_auto_merge=True)
        )
        mock_client.checks.configure("list_for_ref", response=[create_check_run()])

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.message == "Successfully auto-merged PR #7"
        assert outcome.decision is not None and outcome.decision.merge_method == "merge"
        assert mock_client.was_called("pulls.enable_auto_merge")

    def test_no_pr_url(self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient) -> None:
        mock_cursor.agents.configure("get", response=create_agent_status("bc-2", pr_url=None))

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-2")

        assert not outcome.success
        assert outcome.message == "No changes made, nothing to PR."
        assert mock_client.call_order() == ["agents.get"]

    def test_already_merged(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient
    ) -> None:
        mock_cursor.agents.configure("get", response=create_agent_status("bc-1"))
        mock_client.pulls.configure(
            "get", response=create_pull_request_status(7, state="closed", merged=True)
        )

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.message == "This PR has already been merged."
        assert not mock_client.was_called("pulls.update_branch")

    def test_closed(self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient) -> None:
        mock_cursor.agents.configure("get", response=create_agent_status("bc-1"))
        mock_client.pulls.configure("get", response=create_pull_request_status(7, state="closed"))

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.message == "This PR has been canceled."
        assert not outcome.success

    def test_conflict_recommends_follow_up_without_gating(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.pulls.configure("update_branch", error=CONFLICT)

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert not outcome.success
        assert outcome.message.startswith("Cannot rebase to `main` due to conflicts.")
        assert "cursor/fix-build" in outcome.message
        assert outcome.rebase_error == "merge conflict between base and head"
        assert not mock_client.was_called("checks.list_for_ref")
        assert not mock_client.was_called("pulls.merge")
        assert not mock_client.was_called("agents.add_follow_up")

    def test_conflict_sends_follow_up_when_asked(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.pulls.configure("update_branch", error=CONFLICT)

        outcome = merge_agent_pull_request(
            mock_client, mock_cursor, "bc-1", follow_up_on_conflict=True
        )

        assert outcome.message.endswith("Asked the agent to resolve them.")
        call = mock_client.get_calls("agents.add_follow_up")[0]
        assert call.args == ("bc-1", conflict_follow_up(agent_pr))

    def test_other_rebase_failure_raises(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.pulls.configure("update_branch", error=ServerError("SERVER_ERROR", "oops"))

        with pytest.raises(RebaseError, match="Rebase failed: oops"):
            merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert not mock_client.was_called("checks.list_for_ref")

    def test_waits_for_the_updated_head(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        heads = iter(["abc0007", "abc0007", "rebased7", "rebased7"])
        mock_client.pulls.configure(
            "get", handler=lambda repo, pr_number: create_pull_request_status(7, head_sha=next(heads))
        )

        with patch("mergegate.agent_merge.time.sleep") as mock_sleep:
            outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.success
        assert mock_sleep.call_count == 1
        assert mock_client.get_calls("checks.list_for_ref")[0].args == ("octo/app", "rebased7")

    def test_head_that_never_moves_is_not_gated(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.pulls.configure("get", response=agent_pr)

        with patch("mergegate.agent_merge.time.sleep") as mock_sleep:
            outcome = merge_agent_pull_request(
                mock_client, mock_cursor, "bc-1", head_timeout=6.0, poll_interval=2.0
            )

        assert not outcome.success
        assert outcome.message == "Branch update for PR #7 has not reached GitHub yet; retry later."
        assert mock_client.call_count("pulls.get") == 4
        assert mock_sleep.call_count == 2
        assert not mock_client.was_called("checks.list_for_ref")
        assert not mock_client.was_called("pulls.merge")

    def test_already_up_to_date_skips_the_wait(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.pulls.configure("update_branch", error=UP_TO_DATE)
        mock_client.pulls.configure("get", response=agent_pr)

        with patch("mergegate.agent_merge.time.sleep") as mock_sleep:
            outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert outcome.success
        mock_sleep.assert_not_called()
        assert mock_client.get_calls("checks.list_for_ref")[0].args == ("octo/app", "abc0007")

    def test_blocked_by_gate(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.checks.configure(
            "list_for_ref",
            response=[create_check_run("e2e", status="in_progress", conclusion="")],
        )

        outcome = merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

        assert not outcome.success
        assert outcome.message == (
            "Merge blocked: CI still running - manual merge blocked. Waiting for: e2e"
        )
        assert outcome.ci_status is not None and outcome.ci_status.overall == "pending"
        assert not mock_client.was_called("pulls.merge")

    def test_auth_failure_propagates(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        mock_client.users.configure(
            "current", error=AuthenticationError("UNAUTHORIZED", "Bad credentials")
        )

        with pytest.raises(AuthenticationError):
            merge_agent_pull_request(mock_client, mock_cursor, "bc-1")

    def test_to_dict(
        self, mock_client: MockGitHubClient, mock_cursor: MockCursorClient, agent_pr
    ) -> None:
        data = merge_agent_pull_request(mock_client, mock_cursor, "bc-1").to_dict()

        assert data["success"] is True
        assert data["agentId"] == "bc-1"
        assert data["prStatus"]["number"] == 7
        assert data["decision"]["strategy"] == "manual-merge"
