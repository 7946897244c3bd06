"""Data models for card migration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from releasebot.tracker import Card, Column, Issue


class Priority(str, Enum):
    """Priority bucket of an issue, from its ``priority/...`` label."""

    P0 = "p0"
    P1 = "p1"
    P2 = "p2"
    NONE = "none"

    @classmethod
    def of(cls, labels: list[str]) -> Priority:
        """First ``priority/p0|p1|p2`` label wins; anything else is NONE."""
        for name in labels:
            prefix, _, level = name.partition("/")
            if prefix == "priority" and level in ("p0", "p1", "p2"):
                return cls(level)
        return cls.NONE


@dataclass
class CardMove:
    """One card to relocate, with the issue it references."""

    card: Card
    issue: Issue
    priority: Priority


@dataclass
class ColumnPlan:
    """Cards of one source column, bucketed by priority.

    Attributes:
        name: Column name, identical on both boards.
        source: Column on the source board.
        destination: Column on the destination board.
        buckets: Cards per priority, each in source order (top first).
    """

    name: str
    source: Column
    destination: Column
    buckets: dict[Priority, list[CardMove]] = field(
        default_factory=lambda: {priority: [] for priority in Priority}
    )

    def add(self, move: CardMove) -> None:
        self.buckets[move.priority].append(move)

    def in_order(self, order: tuple[Priority, ...], reverse: bool = False) -> list[CardMove]:
        """Moves bucket by bucket in ``order``; ``reverse`` flips each bucket."""
        moves = []
        for priority in order:
            bucket = self.buckets[priority]
            moves.extend(reversed(bucket) if reverse else bucket)
        return moves

    @property
    def size(self) -> int:
        return sum(len(moves) for moves in self.buckets.values())


@dataclass
class MigrationResult:
    """Outcome of a migration run.

    Attributes:
        moved: Issue numbers whose card now sits on the destination board.
        already_present: Issue numbers the destination board already had.
        failed: Issue numbers whose delete or create failed.
        dry_run: Whether the run only planned.
    """

    moved: list[int] = field(default_factory=list)
    already_present: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    dry_run: bool = False
