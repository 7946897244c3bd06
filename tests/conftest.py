"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import itertools

import pytest

from releasebot.tracker import (
    Board,
    Card,
    Column,
    Issue,
    Label,
    Repository,
    TrackerNotFoundError,
    TrackerValidationError,
)

API = "https://api.github.com"
REPO = Repository(owner="docker", name="staging-release-tracking")


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeTracker:
    """In-memory stand-in for TrackerClient holding one repository's state.

    Cards are kept top first; creating or moving a card puts it at the top,
    as GitHub does. Every write is recorded in ``writes``.
    """

    def __init__(self, repo: Repository = REPO) -> None:
        self.repo = repo
        self.labels: dict[str, Label] = {}
        self.issues: dict[int, Issue] = {}
        self.boards: list[Board] = []
        self.columns: dict[int, list[Column]] = {}
        self.cards: dict[int, list[Card]] = {}
        self.writes: list[tuple] = []
        self.deadline = None
        self._ids = itertools.count(100)

    # Seeding helpers

    def add_board(self, name: str, state: str = "open", board_id: int | None = None) -> Board:
        board_id = board_id if board_id is not None else next(self._ids)
        board = Board(id=board_id, name=name, state=state, url=f"{API}/projects/{board_id}")
        self.boards.append(board)
        self.columns[board.id] = []
        return board

    def add_column(self, board: Board, name: str) -> Column:
        column_id = next(self._ids)
        column = Column(
            id=column_id, name=name, url=f"{API}/projects/columns/{column_id}", board_url=board.url
        )
        self.columns[board.id].append(column)
        self.cards[column.id] = []
        return column

    def add_release_board(self, name: str, state: str = "open") -> Board:
        board = self.add_board(name, state)
        for column in ("Triage", "Cherry Pick", "Cherry Picked"):
            self.add_column(board, column)
        return board

    def add_issue(self, number: int, labels: list[str] | None = None, pr: bool = False) -> Issue:
        issue = Issue(
            id=1000 + number,
            number=number,
            url=f"{API}/repos/{self.repo.full_name}/issues/{number}",
            labels=list(labels or []),
            is_pull_request=pr,
        )
        self.issues[number] = issue
        for name in issue.labels:
            self.labels.setdefault(name, Label(name=name))
        return issue

    def add_card(self, column: Column, issue: Issue) -> Card:
        """Append a card at the bottom of a column (seeding order)."""
        card = self._new_card(column, issue.url)
        self.cards[column.id].append(card)
        return card

    def column(self, board: Board, name: str) -> Column:
        return next(c for c in self.columns[board.id] if c.name == name)

    def issue_numbers(self, column: Column) -> list[int]:
        """Issue numbers of a column's cards, top first."""
        return [int(card.content_url.rsplit("/", 1)[1]) for card in self.cards[column.id]]

    def issue_labels(self, number: int) -> list[str]:
        return list(self.issues[number].labels)

    def write_kinds(self) -> list[str]:
        return [write[0] for write in self.writes]

    def _new_card(self, column: Column, content_url: str) -> Card:
        card_id = next(self._ids)
        return Card(
            id=card_id,
            content_url=content_url,
            column_url=column.url,
            url=f"{API}/projects/columns/cards/{card_id}",
        )

    def _board_of(self, column_id: int) -> Board:
        for board in self.boards:
            if any(c.id == column_id for c in self.columns[board.id]):
                return board
        raise TrackerNotFoundError("column not found", status_code=404)

    def _locate(self, card_id: int) -> tuple[int, Card]:
        for column_id, cards in self.cards.items():
            for card in cards:
                if card.id == card_id:
                    return column_id, card
        raise TrackerNotFoundError("card not found", status_code=404)

    # TrackerClient surface

    def scoped(self, deadline):
        self.deadline = deadline
        return self

    def close(self) -> None:
        pass

    def list_labels(self, repo):
        return list(self.labels.values())

    def create_label(self, repo, name, color):
        if name in self.labels:
            raise TrackerValidationError("label exists", status_code=422)
        self.writes.append(("create_label", name, color))
        self.labels[name] = Label(name=name, color=color)
        return self.labels[name]

    def add_labels(self, repo, number, names):
        self.writes.append(("add_labels", number, tuple(names)))
        issue = self.issues[number]
        for name in names:
            if name not in issue.labels:
                issue.labels.append(name)
        return [Label(name=name) for name in issue.labels]

    def remove_label(self, repo, number, name):
        self.writes.append(("remove_label", number, name))
        issue = self.issues[number]
        if name not in issue.labels:
            raise TrackerNotFoundError("Label does not exist", status_code=404)
        issue.labels.remove(name)

    def list_issue_labels(self, repo, number):
        return [Label(name=name) for name in self.issues[number].labels]

    def list_issues(self, repo, state="all"):
        return list(self.issues.values())

    def get_pull_request_id(self, repo, number):
        return 5000 + number

    def list_boards(self, repo, state="open"):
        return [b for b in self.boards if state == "all" or b.state == state]

    def create_board(self, repo, name, body=""):
        self.writes.append(("create_board", name, body))
        return self.add_board(name)

    def update_board_state(self, board_id, state):
        self.writes.append(("update_board_state", board_id, state))
        board = next(b for b in self.boards if b.id == board_id)
        board.state = state
        return board

    def get_board_by_url(self, url):
        return next(b for b in self.boards if b.url == url)

    def list_columns(self, board_id):
        return list(self.columns[board_id])

    def get_column(self, column_id):
        board = self._board_of(column_id)
        return next(c for c in self.columns[board.id] if c.id == column_id)

    def get_column_by_url(self, url):
        return next(c for cols in self.columns.values() for c in cols if c.url == url)

    def create_column(self, board_id, name):
        self.writes.append(("create_column", board_id, name))
        board = next(b for b in self.boards if b.id == board_id)
        return self.add_column(board, name)

    def list_cards(self, column_id):
        return list(self.cards[column_id])

    def create_card(self, column_id, content_id, content_type):
        self.writes.append(("create_card", column_id, content_id, content_type))
        number = content_id - (5000 if content_type == "PullRequest" else 1000)
        content_url = self.issues[number].url
        board = self._board_of(column_id)
        for column in self.columns[board.id]:
            if any(card.content_url == content_url for card in self.cards[column.id]):
                raise TrackerValidationError("Project already has the associated issue", 422)
        column = self.get_column(column_id)
        card = self._new_card(column, content_url)
        self.cards[column_id].insert(0, card)
        return card

    def create_issue_card(self, column_id, repo, issue):
        if issue.is_pull_request:
            pr_id = self.get_pull_request_id(repo, issue.number)
            return self.create_card(column_id, pr_id, "PullRequest")
        return self.create_card(column_id, issue.id, "Issue")

    def move_card(self, card_id, column_id, position="top"):
        self.writes.append(("move_card", card_id, column_id, position))
        old_column_id, card = self._locate(card_id)
        self.cards[old_column_id].remove(card)
        card.column_url = self.get_column(column_id).url
        self.cards[column_id].insert(0, card)

    def delete_card(self, card_id):
        self.writes.append(("delete_card", card_id))
        column_id, card = self._locate(card_id)
        self.cards[column_id].remove(card)


@pytest.fixture
def repo() -> Repository:
    return REPO


@pytest.fixture
def tracker() -> FakeTracker:
    """Create an empty in-memory tracker."""
    return FakeTracker()
