"""ColumnResolver - finds a board's column for a stage or column name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from releasebot.resolver.exceptions import ColumnNotFoundError
from releasebot.stages import column_name_for

if TYPE_CHECKING:
    from releasebot.tracker import Board, Column, TrackerClient


class ColumnResolver:
    """Looks up columns on a board.

    Both finders accept an already fetched column list so a caller that needs
    the columns anyway does not list them twice.
    """

    def __init__(self, tracker: TrackerClient) -> None:
        self.tracker = tracker

    def list_columns(self, board: Board) -> list[Column]:
        return self.tracker.list_columns(board.id)

    def find_column(
        self, board: Board, stage: str, columns: list[Column] | None = None
    ) -> Column:
        """Find the column for a stage ("cherry-pick" -> "Cherry Pick").

        Raises:
            ColumnNotFoundError: If the board has no such column
        """
        return self.find_column_by_name(board, column_name_for(stage), columns)

    def find_column_by_name(
        self, board: Board, name: str, columns: list[Column] | None = None
    ) -> Column:
        """Find a column by its exact name.

        Raises:
            ColumnNotFoundError: If the board has no such column
        """
        if columns is None:
            columns = self.list_columns(board)
        for column in columns:
            if column.name == name:
                return column
        raise ColumnNotFoundError(
            f"Column '{name}' not found in project {board.name}. "
            f"Available: {[c.name for c in columns]}"
        )
