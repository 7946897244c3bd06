"""PlacementReconciler - keeps card placement and stage labels in agreement.

Two directions are handled:

- label -> placement: a stage label added to an issue puts the issue's card in
  the matching column of the release's open board (create, move or leave it);
  a stage label removed deletes the card from that stage's column.
- placement -> label: a card created in or moved to a column gets the issue
  the column's stage label and loses the release's other stage labels; a
  deleted card loses all of them.

Nothing is cached. Every step re-reads GitHub, and every write is guarded by
a read, so the label and card events this reconciler causes itself settle
without further writes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from releasebot.reconciler.models import LabelSync, PlacementOutcome
from releasebot.resolver import (
    BoardNotFoundError,
    BoardResolver,
    BoardScope,
    ColumnNotFoundError,
    ColumnResolver,
)
from releasebot.stages import (
    MalformedLabelError,
    canonical_labels,
    parse,
    release_prefix,
    stage_for,
)
from releasebot.tracker import TrackerNotFoundError, TrackerValidationError

if TYPE_CHECKING:
    from releasebot.stages import StageLabel
    from releasebot.tracker import Board, Card, Column, Issue, Repository, TrackerClient

logger = logging.getLogger("releasebot.reconciler.placement")


class PlacementReconciler:
    """Reconciles an issue's card placement with its stage labels."""

    def __init__(
        self,
        tracker: TrackerClient,
        boards: BoardResolver | None = None,
        columns: ColumnResolver | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            tracker: TrackerClient used for every read and write.
            boards: Board resolver (defaults to one over ``tracker``).
            columns: Column resolver (defaults to one over ``tracker``).
        """
        self.tracker = tracker
        self.boards = boards or BoardResolver(tracker)
        self.columns = columns or ColumnResolver(tracker)

    # Label -> placement

    def apply_label(self, repo: Repository, issue: Issue, label: str) -> PlacementOutcome:
        """Put the issue's card in the column named by a newly added stage label.

        Args:
            repo: Repository the issue belongs to.
            issue: The labeled issue.
            label: Name of the added label.

        Returns:
            What happened to the card.
        """
        resolved = self._resolve_stage_column(repo, label)
        if resolved is None:
            return PlacementOutcome.SKIPPED
        board, destination, columns = resolved

        found = self._find_card(columns, issue.url)
        if found is None:
            try:
                card = self.tracker.create_issue_card(destination.id, repo, issue)
            except TrackerValidationError as e:
                # Another job placed the card between our read and this write
                logger.warning(
                    "Card for #%d already on %s, leaving it: %s", issue.number, board.name, e
                )
                return PlacementOutcome.UNCHANGED
            logger.info(
                "Created card %d for #%d in %s/%s",
                card.id,
                issue.number,
                board.name,
                destination.name,
            )
            return PlacementOutcome.CREATED

        card, current = found
        if current.id == destination.id:
            logger.debug(
                "Card for #%d already in %s/%s", issue.number, board.name, destination.name
            )
            return PlacementOutcome.UNCHANGED

        self.tracker.move_card(card.id, destination.id, position="top")
        logger.info(
            "Moved card for #%d from %s to %s in %s",
            issue.number,
            current.name,
            destination.name,
            board.name,
        )
        return PlacementOutcome.MOVED

    def remove_label(self, repo: Repository, issue: Issue, label: str) -> PlacementOutcome:
        """Delete the issue's card when the removed label's column holds it.

        A card sitting in any other column is left alone: the label removal is
        then the tail of a move to that column, not a request to drop the card.
        """
        resolved = self._resolve_stage_column(repo, label)
        if resolved is None:
            return PlacementOutcome.SKIPPED
        board, stage_column, columns = resolved

        found = self._find_card(columns, issue.url)
        if found is None:
            logger.debug("No card for #%d in %s", issue.number, board.name)
            return PlacementOutcome.UNCHANGED

        card, current = found
        if current.id != stage_column.id:
            logger.debug(
                "Card for #%d is in %s, not %s; keeping it",
                issue.number,
                current.name,
                stage_column.name,
            )
            return PlacementOutcome.UNCHANGED

        self.tracker.delete_card(card.id)
        logger.info("Deleted card for #%d from %s/%s", issue.number, board.name, current.name)
        return PlacementOutcome.DELETED

    def _resolve_stage_column(
        self, repo: Repository, label: str
    ) -> tuple[Board, Column, list[Column]] | None:
        """Board, stage column and all columns for a stage label, or None to skip."""
        try:
            stage_label = parse(label)
        except MalformedLabelError:
            return None

        try:
            board = self.boards.find_board(repo, stage_label.prefix, BoardScope.OPEN)
        except BoardNotFoundError as e:
            logger.info("Ignoring label %s: %s", label, e)
            return None

        columns = self.columns.list_columns(board)
        try:
            column = self.columns.find_column(board, stage_label.stage, columns)
        except ColumnNotFoundError as e:
            logger.warning("Ignoring label %s: %s", label, e)
            return None

        return board, column, columns

    def _find_card(self, columns: list[Column], content_url: str) -> tuple[Card, Column] | None:
        """The card referencing ``content_url`` and its column, searching every column."""
        for column in columns:
            for card in self.tracker.list_cards(column.id):
                if card.content_url == content_url:
                    return card, column
        return None

    # Placement -> label

    def sync_labels(self, repo: Repository, card: Card) -> LabelSync:
        """Give the card's issue exactly its column's stage label.

        Writes happen only where the issue's labels differ from the target, so
        reconciling a card that already agrees issues no add or remove calls.
        Cards in custom columns, and cards on closed boards, are not label-synced.
        """
        number = card.issue_number
        if number is None:
            logger.debug("Card %d has no issue content; nothing to sync", card.id)
            return LabelSync()

        column = self.tracker.get_column_by_url(card.column_url)
        stage = stage_for(column.name)
        if stage is None:
            logger.debug(
                "Column %s is not a stage column; labels of #%d left alone", column.name, number
            )
            return LabelSync()

        board = self.tracker.get_board_by_url(column.board_url)
        if not board.is_open:
            logger.debug("Project %s is closed; labels of #%d left alone", board.name, number)
            return LabelSync()

        labels = canonical_labels(release_prefix(board.name))
        target = next(label for label in labels if label.stage == stage)
        current = {label.name for label in self.tracker.list_issue_labels(repo, number)}

        result = LabelSync()
        if target.name not in current:
            self.tracker.add_labels(repo, number, [target.name])
            result.added.append(target.name)

        stale = [label for label in labels if label != target and label.name in current]
        result.removed.extend(self._remove_labels(repo, number, stale))

        if result.changed:
            logger.info(
                "Synced labels of #%d to %s/%s: +%s -%s",
                number,
                board.name,
                column.name,
                result.added,
                result.removed,
            )
        return result

    def clear_labels(self, repo: Repository, card: Card) -> LabelSync:
        """Remove every stage label of the card's release from its issue.

        Deletions on a closed board are ignored: the open board of the release
        owns the labels, and migrating cards off a closed board deletes them
        there.
        """
        number = card.issue_number
        if number is None:
            return LabelSync()

        column = self.tracker.get_column_by_url(card.column_url)
        board = self.tracker.get_board_by_url(column.board_url)
        if not board.is_open:
            logger.debug("Card for #%d deleted from closed project %s", number, board.name)
            return LabelSync()

        labels = canonical_labels(release_prefix(board.name))

        result = LabelSync(removed=self._remove_labels(repo, number, labels))
        logger.info("Card for #%d deleted from %s; removed %s", number, board.name, result.removed)
        return result

    def _remove_labels(self, repo: Repository, number: int, labels: list[StageLabel]) -> list[str]:
        """Remove labels, treating "not applied" as already done."""
        removed = []
        for label in labels:
            try:
                self.tracker.remove_label(repo, number, label.name)
            except TrackerNotFoundError:
                logger.debug("Label %s was not on #%d", label.name, number)
                continue
            removed.append(label.name)
        return removed
