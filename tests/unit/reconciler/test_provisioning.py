"""Unit tests for ProvisioningReconciler and RetryPolicy."""

import pytest

from releasebot.reconciler import (
    ProvisioningReconciler,
    ProvisioningTimeoutError,
    RetryPolicy,
)
from releasebot.tracker import TrackerError


class FailingColumnTracker:
    """Wraps a tracker and fails the n-th column creation."""

    def __init__(self, tracker, fail_on: int) -> None:
        self._tracker = tracker
        self._fail_on = fail_on
        self._created = 0

    def __getattr__(self, name):
        return getattr(self._tracker, name)

    def create_column(self, board_id, name):
        self._created += 1
        if self._created == self._fail_on:
            raise TrackerError("Failed to create column: 500", status_code=500)
        return self._tracker.create_column(board_id, name)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def policy(sleeps: list[float]) -> RetryPolicy:
    """Retry policy that records its sleeps instead of sleeping."""
    return RetryPolicy(retries=3, interval=5.0, sleep=sleeps.append)


@pytest.mark.unit
class TestProvision:
    """Tests for provision."""

    def test_creates_columns_then_labels(self, tracker, repo) -> None:
        """A new board gets the three columns in order and the stage labels."""
        board = tracker.add_board("18.09-ee-rc1")

        result = ProvisioningReconciler(tracker).provision(repo, board)

        assert result.columns_created == ["Triage", "Cherry Pick", "Cherry Picked"]
        assert result.labels_created == [
            "18.09-ee/triage",
            "18.09-ee/cherry-pick",
            "18.09-ee/cherry-picked",
        ]
        assert tracker.write_kinds() == ["create_column"] * 3 + ["create_label"] * 3
        assert [c.name for c in tracker.columns[board.id]] == list(result.columns_created)
        assert tracker.labels["18.09-ee/cherry-pick"].color == "a98bf3"

    def test_skips_existing(self, tracker, repo) -> None:
        """Columns and labels that exist are not created again."""
        board = tracker.add_board("17.06.1-ee-1-rc3")
        tracker.add_column(board, "Triage")
        tracker.add_issue(1, ["17.06.1-ee-1/triage"])

        result = ProvisioningReconciler(tracker).provision(repo, board)

        assert result.columns_created == ["Cherry Pick", "Cherry Picked"]
        assert result.labels_created == [
            "17.06.1-ee-1/cherry-pick",
            "17.06.1-ee-1/cherry-picked",
        ]

    def test_second_run_creates_nothing(self, tracker, repo) -> None:
        """Provisioning twice is harmless."""
        board = tracker.add_board("18.09-ee-rc1")
        reconciler = ProvisioningReconciler(tracker)
        reconciler.provision(repo, board)
        tracker.writes.clear()

        result = reconciler.provision(repo, board)

        assert result.columns_created == []
        assert result.labels_created == []
        assert tracker.writes == []

    def test_failure_stops_the_run(self, tracker, repo) -> None:
        """The first failed creation aborts; earlier columns stay."""
        board = tracker.add_board("18.09-ee-rc1")
        failing = FailingColumnTracker(tracker, fail_on=2)

        with pytest.raises(TrackerError):
            ProvisioningReconciler(failing).provision(repo, board)

        assert [c.name for c in tracker.columns[board.id]] == ["Triage"]
        assert "create_label" not in tracker.write_kinds()


@pytest.mark.unit
class TestWaitForProvisioning:
    """Tests for wait_for_provisioning."""

    def test_already_provisioned(self, tracker, policy, sleeps) -> None:
        """No sleeping when the columns are there."""
        board = tracker.add_release_board("18.09-ee-rc1")

        ProvisioningReconciler(tracker).wait_for_provisioning(board, policy)

        assert sleeps == []

    def test_columns_appear_while_waiting(self, tracker, sleeps) -> None:
        """Columns created between checks end the wait."""
        board = tracker.add_board("18.09-ee-rc1")
        names = iter(["Triage", "Cherry Pick", "Cherry Picked"])

        def sleep(seconds: float) -> None:
            sleeps.append(seconds)
            tracker.add_column(board, next(names))

        policy = RetryPolicy(retries=3, interval=5.0, sleep=sleep)
        ProvisioningReconciler(tracker).wait_for_provisioning(board, policy)

        assert sleeps == [5.0, 5.0, 5.0]

    def test_times_out(self, tracker, policy, sleeps) -> None:
        """An unprovisioned board fails after the retries."""
        board = tracker.add_board("18.09-ee-rc1")

        with pytest.raises(ProvisioningTimeoutError, match="found 0 column"):
            ProvisioningReconciler(tracker).wait_for_provisioning(board, policy)

        assert sleeps == [5.0, 5.0, 5.0]

    def test_extra_columns_do_not_count(self, tracker, policy) -> None:
        """Exactly three columns means provisioned."""
        board = tracker.add_release_board("18.09-ee-rc1")
        tracker.add_column(board, "Done")

        with pytest.raises(ProvisioningTimeoutError):
            ProvisioningReconciler(tracker).wait_for_provisioning(board, policy)


@pytest.mark.unit
class TestRetryPolicy:
    """Tests for RetryPolicy.poll."""

    def test_returns_first_accepted_value(self, policy, sleeps) -> None:
        """Polling stops at the first accepted value."""
        values = iter([1, 2, 3])

        assert policy.poll(lambda: next(values), lambda v: v == 2) == (True, 2)
        assert sleeps == [5.0]

    def test_zero_retries_checks_once(self, sleeps) -> None:
        """With no retries there is a single check."""
        policy = RetryPolicy(retries=0, sleep=sleeps.append)

        assert policy.poll(lambda: 0, lambda v: v > 0) == (False, 0)
        assert sleeps == []
