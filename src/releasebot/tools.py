"""Batch operations behind the ``transfer-cards`` and ``create-project`` commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from releasebot.migration import CardMigrator, MigrationError, MigrationResult
from releasebot.reconciler import ProvisioningReconciler, ProvisioningResult, RetryPolicy
from releasebot.resolver import BoardExistsError, BoardNotFoundError, BoardResolver
from releasebot.tracker import TrackerError

if TYPE_CHECKING:
    from releasebot.tracker import Board, Repository, TrackerClient

logger = logging.getLogger("releasebot.tools")


def transfer_cards(
    tracker: TrackerClient,
    repo: Repository,
    source_name: str,
    destination_name: str,
    column_names: list[str],
    dry_run: bool = False,
    policy: RetryPolicy | None = None,
) -> MigrationResult:
    """Move the cards of ``column_names`` from one release board to the next.

    The destination board is created when missing, after which the webhook
    server is given a bounded time to provision it. The source board is
    closed before its cards move.

    Raises:
        BoardNotFoundError: If the source board does not exist
        MigrationError: If the destination is missing during a dry run
        ProvisioningTimeoutError: If a created destination is not provisioned
        ColumnNotFoundError: If a column is missing on either board
    """
    boards = BoardResolver(tracker)
    source = boards.find_board_by_name(repo, source_name)

    try:
        destination = boards.find_board_by_name(repo, destination_name)
    except BoardNotFoundError as e:
        if dry_run:
            raise MigrationError(
                f"{e}; rerun without --dry-run if you would like it to be created"
            ) from e
        logger.info("Project %s not found, creating it", destination_name)
        destination = boards.create_board(repo, destination_name)
        ProvisioningReconciler(tracker).wait_for_provisioning(destination, policy)

    logger.info("Source project: %s, Dest Project: %s", source.name, destination.name)

    if not dry_run:
        try:
            tracker.update_board_state(source.id, "closed")
        except TrackerError as e:
            logger.warning("Could not close project %s: %s", source.name, e)

    migrator = CardMigrator(tracker, repo, dry_run=dry_run)
    result = migrator.migrate(source, destination, column_names)
    logger.info(
        "Transfer finished: %d moved, %d already present, %d failed",
        len(result.moved),
        len(result.already_present),
        len(result.failed),
    )
    return result


def create_project(
    tracker: TrackerClient,
    repo: Repository,
    name: str,
    provision: bool = True,
    policy: RetryPolicy | None = None,
) -> tuple[Board, ProvisioningResult | None]:
    """Create a release board and its columns and stage labels.

    Args:
        tracker: TrackerClient for the target repository.
        repo: Repository to create the board in.
        name: Board name, e.g. "17.06.1-ce-rc4".
        provision: Create columns and labels here; otherwise wait for the
            webhook server to do it.
        policy: Poll policy used when waiting.

    Raises:
        BoardExistsError: If a board with this name exists
        ProvisioningTimeoutError: If waiting and provisioning does not complete
    """
    boards = BoardResolver(tracker)
    try:
        boards.find_board_by_name(repo, name)
    except BoardNotFoundError:
        pass
    else:
        raise BoardExistsError(f"Project '{name}' already exists for repo {repo.full_name}")

    logger.info("Attempting to create project '%s' at %s", name, repo.full_name)
    board = boards.create_board(repo, name)

    provisioning = ProvisioningReconciler(tracker)
    if not provision:
        provisioning.wait_for_provisioning(board, policy)
        return board, None
    return board, provisioning.provision(repo, board)
