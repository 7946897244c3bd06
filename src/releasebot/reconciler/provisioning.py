"""ProvisioningReconciler - sets up a newly created release board."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from releasebot.reconciler.exceptions import ProvisioningTimeoutError
from releasebot.reconciler.models import ProvisioningResult
from releasebot.reconciler.retry import RetryPolicy
from releasebot.stages import STANDARD_COLUMNS, canonical_labels, release_prefix
from releasebot.tracker import TrackerError

if TYPE_CHECKING:
    from releasebot.tracker import Board, Repository, TrackerClient

logger = logging.getLogger("releasebot.reconciler.provisioning")


class ProvisioningReconciler:
    """Creates a release board's standard columns and stage labels."""

    def __init__(self, tracker: TrackerClient) -> None:
        self.tracker = tracker

    def provision(self, repo: Repository, board: Board) -> ProvisioningResult:
        """Create the Triage, Cherry Pick and Cherry Picked columns and labels.

        Columns and labels that already exist are skipped. The first failed
        creation stops the run; whatever was created before it stays.

        Args:
            repo: Repository owning the board and labels.
            board: The new board. Labels use its name without the -rc suffix.

        Returns:
            Names of the columns and labels created.

        Raises:
            TrackerError: If a creation fails.
        """
        result = ProvisioningResult()
        try:
            existing_columns = {column.name for column in self.tracker.list_columns(board.id)}
            for name in STANDARD_COLUMNS:
                if name in existing_columns:
                    logger.debug("Column %s already exists in %s", name, board.name)
                    continue
                self.tracker.create_column(board.id, name)
                result.columns_created.append(name)
                logger.info("Created column %s in %s", name, board.name)

            prefix = release_prefix(board.name)
            existing_labels = {label.name for label in self.tracker.list_labels(repo)}
            for label in canonical_labels(prefix):
                if label.name in existing_labels:
                    logger.debug("Label %s already exists in %s", label.name, repo.full_name)
                    continue
                self.tracker.create_label(repo, label.name, label.color)
                result.labels_created.append(label.name)
                logger.info("Created label %s", label.name)
        except TrackerError:
            logger.error(
                "Provisioning of %s stopped after columns %s and labels %s",
                board.name,
                result.columns_created,
                result.labels_created,
            )
            raise

        return result

    def wait_for_provisioning(self, board: Board, policy: RetryPolicy | None = None) -> None:
        """Block until the board shows exactly its standard columns.

        Used by tools that create a board and rely on the webhook server to
        provision it.

        Raises:
            ProvisioningTimeoutError: If the columns do not appear in time
        """
        policy = policy or RetryPolicy()
        logger.info("Waiting for release-bot to provision %s", board.name)

        def column_count() -> int:
            count = len(self.tracker.list_columns(board.id))
            logger.info("Provisioning progress for %s: %d column(s)", board.name, count)
            return count

        done, count = policy.poll(column_count, lambda n: n == len(STANDARD_COLUMNS))
        if not done:
            raise ProvisioningTimeoutError(
                f"Provisioning of {board.name} did not complete: "
                f"found {count} column(s), expected {len(STANDARD_COLUMNS)}"
            )
