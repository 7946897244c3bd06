"""BoardResolver - finds and creates release boards."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from releasebot.resolver.exceptions import BoardNotFoundError

if TYPE_CHECKING:
    from releasebot.tracker import Board, Repository, TrackerClient

logger = logging.getLogger("releasebot.resolver.boards")


class BoardScope(str, Enum):
    """Which boards take part in resolution."""

    OPEN = "open"
    ALL = "all"


def board_description(name: str) -> str:
    """Description for a new release board.

    ``18.02.0-ce-rc2`` becomes ``Docker 18.02.0 CE RC2 release``; names that do
    not split into version, edition and candidate get no description.
    """
    info = name.split("-")
    if len(info) != 3:
        return ""
    version, edition, candidate = info
    return f"Docker {version} {edition.upper()} {candidate.upper()} release"


class BoardResolver:
    """Resolves release boards of a repository by name."""

    def __init__(self, tracker: TrackerClient) -> None:
        self.tracker = tracker

    def find_board(
        self, repo: Repository, prefix: str, scope: BoardScope = BoardScope.OPEN
    ) -> Board:
        """Find the board whose name starts with ``prefix``.

        When several boards match, the one with the smallest id (the oldest)
        wins, independent of the order GitHub lists them in.

        Raises:
            BoardNotFoundError: If no board in scope matches
        """
        boards = self.tracker.list_boards(repo, state=scope.value)
        matches = [board for board in boards if board.name.startswith(prefix)]
        if not matches:
            raise BoardNotFoundError(
                f"No {scope.value} project found with prefix {prefix} in {repo.full_name}"
            )
        board = min(matches, key=lambda b: b.id)
        if len(matches) > 1:
            logger.warning(
                "%d projects match prefix %s in %s (%s); using %s",
                len(matches),
                prefix,
                repo.full_name,
                ", ".join(b.name for b in matches),
                board.name,
            )
        return board

    def find_board_by_name(
        self, repo: Repository, name: str, scope: BoardScope = BoardScope.ALL
    ) -> Board:
        """Find the board named exactly ``name``.

        Raises:
            BoardNotFoundError: If no board in scope has that name
        """
        logger.debug("Looking for project %s in %s", name, repo.full_name)
        for board in self.tracker.list_boards(repo, state=scope.value):
            if board.name == name:
                return board
        raise BoardNotFoundError(f"Project '{name}' not found in repo {repo.full_name}")

    def create_board(self, repo: Repository, name: str) -> Board:
        """Create a release board with a description derived from its name."""
        board = self.tracker.create_board(repo, name, body=board_description(name))
        logger.info("Created project %s (%d) in %s", board.name, board.id, repo.full_name)
        return board
