"""Inbound events, one class per kind of change release-bot reacts to."""

from __future__ import annotations

from dataclasses import dataclass

from releasebot.tracker import Board, Card, Issue, Repository


@dataclass(frozen=True)
class LabelAdded:
    """A label was added to an issue."""

    repo: Repository
    issue: Issue
    label: str


@dataclass(frozen=True)
class LabelRemoved:
    """A label was removed from an issue."""

    repo: Repository
    issue: Issue
    label: str


@dataclass(frozen=True)
class IssueOpened:
    """An issue was opened, possibly already labeled."""

    repo: Repository
    issue: Issue


@dataclass(frozen=True)
class BoardCreated:
    repo: Repository
    board: Board


@dataclass(frozen=True)
class CardCreated:
    repo: Repository
    card: Card


@dataclass(frozen=True)
class CardMoved:
    repo: Repository
    card: Card


@dataclass(frozen=True)
class CardDeleted:
    repo: Repository
    card: Card


Event = (
    LabelAdded | LabelRemoved | IssueOpened | BoardCreated | CardCreated | CardMoved | CardDeleted
)
