"""CardMigrator - moves cards between release boards in priority order."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from releasebot.migration.models import CardMove, ColumnPlan, MigrationResult, Priority
from releasebot.resolver import ColumnResolver
from releasebot.tracker import TrackerError, TrackerValidationError

if TYPE_CHECKING:
    from releasebot.tracker import Board, Issue, Repository, TrackerClient

logger = logging.getLogger("releasebot.migration")

DELETION_ORDER = (Priority.P2, Priority.P1, Priority.P0, Priority.NONE)

# GitHub inserts every new card at the top of its column, so cards are created
# bottom card first: buckets from least to most important, each bucket in
# reverse source order. The column then reads p0, p1, p2, unprioritized.
CREATION_ORDER = (Priority.NONE, Priority.P2, Priority.P1, Priority.P0)

PAYMENT_REQUIRED = 402


class CardMigrator:
    """Relocates the cards of selected columns from one board to another.

    Source cards are deleted and recreated on the destination board so that
    the destination column lists p0 issues first, then p1, p2 and unprioritized
    ones, each group keeping its source order.
    """

    def __init__(
        self,
        tracker: TrackerClient,
        repo: Repository,
        dry_run: bool = False,
        columns: ColumnResolver | None = None,
    ) -> None:
        """Initialize the migrator.

        Args:
            tracker: TrackerClient for reads and writes.
            repo: Repository owning both boards and the issues.
            dry_run: Plan and log only; no cards are deleted or created.
            columns: Column resolver (defaults to one over ``tracker``).
        """
        self.tracker = tracker
        self.repo = repo
        self.dry_run = dry_run
        self.columns = columns or ColumnResolver(tracker)

    def plan(self, source: Board, destination: Board, column_names: list[str]) -> list[ColumnPlan]:
        """Resolve columns on both boards and bucket the source cards.

        Every column is resolved before any card is looked at, so a missing
        column aborts the run before anything changes.

        Raises:
            ColumnNotFoundError: If a column is missing on either board
        """
        source_columns = self.columns.list_columns(source)
        destination_columns = self.columns.list_columns(destination)
        plans = [
            ColumnPlan(
                name=name,
                source=self.columns.find_column_by_name(source, name, source_columns),
                destination=self.columns.find_column_by_name(
                    destination, name, destination_columns
                ),
            )
            for name in column_names
        ]

        issues = {issue.url: issue for issue in self.tracker.list_issues(self.repo)}
        logger.debug("Loaded %d issue(s) of %s", len(issues), self.repo.full_name)

        for plan in plans:
            for card in self.tracker.list_cards(plan.source.id):
                issue = issues.get(card.content_url) if card.content_url else None
                if issue is None:
                    logger.warning(
                        "Skipping card %d in %s/%s: no issue of %s matches %s",
                        card.id,
                        source.name,
                        plan.name,
                        self.repo.full_name,
                        card.content_url,
                    )
                    continue
                plan.add(CardMove(card=card, issue=issue, priority=Priority.of(issue.labels)))
            logger.info("%s/%s: %d card(s) to move", source.name, plan.name, plan.size)

        return plans

    def migrate(
        self, source: Board, destination: Board, column_names: list[str]
    ) -> MigrationResult:
        """Move every card of ``column_names`` from ``source`` to ``destination``.

        A card the destination already has is a warning; a 402 from GitHub is
        ignored; any other failure is logged and the run continues.
        """
        plans = self.plan(source, destination, column_names)
        result = MigrationResult(dry_run=self.dry_run)

        for plan in plans:
            if self.dry_run:
                for move in plan.in_order(CREATION_ORDER, reverse=True):
                    self._log_move("(dryrun)", source, destination, plan, move.issue)
                    result.moved.append(move.issue.number)
                continue

            deleted = self._delete_cards(source, plan, result)
            for move in plan.in_order(CREATION_ORDER, reverse=True):
                if move.card.id in deleted:
                    self._create_card(source, destination, plan, move, result)

        return result

    def _delete_cards(self, source: Board, plan: ColumnPlan, result: MigrationResult) -> set[int]:
        """Delete the plan's source cards; returns the ids actually deleted."""
        deleted = set()
        for move in plan.in_order(DELETION_ORDER):
            logger.debug("Deleting card for issue #%d from %s", move.issue.number, source.name)
            try:
                self.tracker.delete_card(move.card.id)
            except TrackerError as e:
                logger.error("Error deleting card for issue #%d: %s", move.issue.number, e)
                result.failed.append(move.issue.number)
                continue
            deleted.add(move.card.id)
        return deleted

    def _create_card(
        self,
        source: Board,
        destination: Board,
        plan: ColumnPlan,
        move: CardMove,
        result: MigrationResult,
    ) -> None:
        issue = move.issue
        logger.debug("Creating card for issue #%d in %s", issue.number, destination.name)
        try:
            self.tracker.create_issue_card(plan.destination.id, self.repo, issue)
        except TrackerValidationError:
            logger.warning(
                "Could not create card for issue #%d: issue already exists in project", issue.number
            )
            result.already_present.append(issue.number)
            return
        except TrackerError as e:
            if e.status_code == PAYMENT_REQUIRED:
                logger.debug("Card for issue #%d rejected with 402", issue.number)
            else:
                logger.error("Error creating card for issue #%d: %s", issue.number, e)
                result.failed.append(issue.number)
            return

        self._log_move("", source, destination, plan, issue)
        result.moved.append(issue.number)

    def _log_move(
        self, prefix: str, source: Board, destination: Board, plan: ColumnPlan, issue: Issue
    ) -> None:
        logger.info(
            "%s%s/%s -> %s/%s: #%d",
            prefix,
            source.name,
            plan.name,
            destination.name,
            plan.name,
            issue.number,
        )
