"""Unit tests for the transfer-cards and create-project operations."""

import pytest

from releasebot.migration import MigrationError
from releasebot.reconciler import ProvisioningReconciler, ProvisioningTimeoutError, RetryPolicy
from releasebot.resolver import BoardExistsError, BoardNotFoundError
from releasebot.tools import create_project, transfer_cards


@pytest.fixture
def no_wait() -> RetryPolicy:
    return RetryPolicy(retries=2, interval=5.0, sleep=lambda _: None)


def _bot_policy(tracker, repo) -> RetryPolicy:
    """A policy whose first sleep lets a running bot provision every new board."""

    def sleep(_: float) -> None:
        for board in tracker.boards:
            ProvisioningReconciler(tracker).provision(repo, board)

    return RetryPolicy(retries=3, interval=5.0, sleep=sleep)


@pytest.mark.unit
class TestTransferCards:
    """Tests for transfer_cards."""

    def test_moves_cards_and_closes_source(self, tracker, repo) -> None:
        """Cards move to the existing destination; the source is closed."""
        source = tracker.add_release_board("18.09-ee-rc1")
        destination = tracker.add_release_board("18.09-ee-rc2")
        for number, labels in ((1, []), (2, ["priority/p0"])):
            issue = tracker.add_issue(number, labels)
            tracker.add_card(tracker.column(source, "Triage"), issue)

        result = transfer_cards(tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"])

        assert source.state == "closed"
        assert tracker.issue_numbers(tracker.column(destination, "Triage")) == [2, 1]
        assert sorted(result.moved) == [1, 2]

    def test_closed_source_is_found(self, tracker, repo) -> None:
        """The source may already be closed."""
        tracker.add_release_board("18.09-ee-rc1", state="closed")
        tracker.add_release_board("18.09-ee-rc2")

        result = transfer_cards(tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"])

        assert result.moved == []

    def test_creates_missing_destination(self, tracker, repo) -> None:
        """A missing destination is created and waited on until provisioned."""
        source = tracker.add_release_board("18.09-ee-rc1")
        tracker.add_card(tracker.column(source, "Cherry Pick"), tracker.add_issue(3))

        result = transfer_cards(
            tracker,
            repo,
            "18.09-ee-rc1",
            "18.09-ee-rc2",
            ["Cherry Pick"],
            policy=_bot_policy(tracker, repo),
        )

        destination = tracker.boards[-1]
        assert destination.name == "18.09-ee-rc2"
        assert tracker.issue_numbers(tracker.column(destination, "Cherry Pick")) == [3]
        assert result.moved == [3]

    def test_unprovisioned_destination_times_out(self, tracker, repo, no_wait) -> None:
        """Nothing moves when the bot never provisions the new board."""
        source = tracker.add_release_board("18.09-ee-rc1")
        tracker.add_card(tracker.column(source, "Triage"), tracker.add_issue(1))

        with pytest.raises(ProvisioningTimeoutError):
            transfer_cards(
                tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"], policy=no_wait
            )

        assert tracker.issue_numbers(tracker.column(source, "Triage")) == [1]
        assert source.state == "open"

    def test_dry_run_needs_destination(self, tracker, repo) -> None:
        """A dry run never creates the destination."""
        tracker.add_release_board("18.09-ee-rc1")

        with pytest.raises(MigrationError, match="rerun without --dry-run"):
            transfer_cards(
                tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"], dry_run=True
            )

        assert tracker.writes == []

    def test_dry_run_leaves_source_open(self, tracker, repo) -> None:
        source = tracker.add_release_board("18.09-ee-rc1")
        tracker.add_release_board("18.09-ee-rc2")

        result = transfer_cards(
            tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"], dry_run=True
        )

        assert result.dry_run
        assert source.state == "open"
        assert tracker.writes == []

    def test_missing_source(self, tracker, repo) -> None:
        with pytest.raises(BoardNotFoundError, match="18.09-ee-rc1"):
            transfer_cards(tracker, repo, "18.09-ee-rc1", "18.09-ee-rc2", ["Triage"])


@pytest.mark.unit
class TestCreateProject:
    """Tests for create_project."""

    def test_creates_and_provisions(self, tracker, repo) -> None:
        """The board is created with its columns and stage labels."""
        board, result = create_project(tracker, repo, "17.06.1-ce-rc4")

        assert [c.name for c in tracker.columns[board.id]] == [
            "Triage",
            "Cherry Pick",
            "Cherry Picked",
        ]
        assert result.labels_created == [
            "17.06.1-ce/triage",
            "17.06.1-ce/cherry-pick",
            "17.06.1-ce/cherry-picked",
        ]
        assert tracker.writes[0] == (
            "create_board",
            "17.06.1-ce-rc4",
            "Docker 17.06.1 CE RC4 release",
        )

    def test_existing_board(self, tracker, repo) -> None:
        """An existing board of that name, open or closed, is an error."""
        tracker.add_board("17.06.1-ce-rc4", state="closed")

        with pytest.raises(BoardExistsError):
            create_project(tracker, repo, "17.06.1-ce-rc4")

        assert tracker.writes == []

    def test_wait_for_bot(self, tracker, repo) -> None:
        """Without provisioning, the call waits for the bot's columns."""
        board, result = create_project(
            tracker, repo, "18.09-ee-rc1", provision=False, policy=_bot_policy(tracker, repo)
        )

        assert result is None
        assert len(tracker.columns[board.id]) == 3

    def test_wait_for_bot_times_out(self, tracker, repo, no_wait) -> None:
        with pytest.raises(ProvisioningTimeoutError):
            create_project(tracker, repo, "18.09-ee-rc1", provision=False, policy=no_wait)
