"""Data models for reconciliation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PlacementOutcome(str, Enum):
    """What a placement reconciliation did to the issue's card."""

    CREATED = "created"
    MOVED = "moved"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"  # not our label, or no board/column to act on


@dataclass
class LabelSync:
    """Labels changed on an issue to match its card's placement.

    Attributes:
        added: Label names added to the issue.
        removed: Label names removed from the issue.
    """

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


@dataclass
class ProvisioningResult:
    """Columns and labels created for a new release board."""

    columns_created: list[str] = field(default_factory=list)
    labels_created: list[str] = field(default_factory=list)
