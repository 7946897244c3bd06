"""Stage label grammar and the stage <-> column name table.

Stage labels look like ``17.06.1-ee-1/triage``: a release prefix and a stage
separated by exactly one ``/``. Boards are named after the release with an
optional release-candidate suffix (``17.06.1-ee-1-rc3``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from releasebot.stages.exceptions import MalformedLabelError

TRIAGE = "triage"
CHERRY_PICK = "cherry-pick"
CHERRY_PICKED = "cherry-picked"

# Canonical stages in board order
CANONICAL_STAGES = (TRIAGE, CHERRY_PICK, CHERRY_PICKED)

STAGE_COLUMNS = {
    TRIAGE: "Triage",
    CHERRY_PICK: "Cherry Pick",
    CHERRY_PICKED: "Cherry Picked",
}

STAGE_COLORS = {
    TRIAGE: "eeeeee",
    CHERRY_PICK: "a98bf3",
    CHERRY_PICKED: "bfe5bf",
}

# Column names a release board is provisioned with, in order
STANDARD_COLUMNS = tuple(STAGE_COLUMNS[stage] for stage in CANONICAL_STAGES)

_COLUMN_STAGES = {column: stage for stage, column in STAGE_COLUMNS.items()}
_RC_SUFFIX = re.compile(r"-rc.*$")


@dataclass(frozen=True)
class StageLabel:
    """A parsed ``{prefix}/{stage}`` label."""

    prefix: str
    stage: str

    @property
    def name(self) -> str:
        return render(self.prefix, self.stage)

    @property
    def column_name(self) -> str:
        return column_name_for(self.stage)

    @property
    def color(self) -> str:
        return STAGE_COLORS.get(self.stage, "ededed")

    def __str__(self) -> str:
        return self.name


def parse(label: str) -> StageLabel:
    """Split a label into release prefix and stage.

    Raises:
        MalformedLabelError: Unless the label has exactly one "/" with
            non-empty text on both sides
    """
    parts = label.split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedLabelError(f"Not a stage label: {label!r}")
    return StageLabel(prefix=parts[0], stage=parts[1])


def render(prefix: str, stage: str) -> str:
    return f"{prefix}/{stage}"


def column_name_for(stage: str) -> str:
    """Column name for a stage; custom stages use the stage text itself."""
    return STAGE_COLUMNS.get(stage, stage)


def stage_for(column_name: str) -> str | None:
    """Canonical stage for a column name, or None for custom columns."""
    return _COLUMN_STAGES.get(column_name)


def release_prefix(board_name: str) -> str:
    """Release prefix of a board name: ``18.09-ee-rc1`` -> ``18.09-ee``."""
    return _RC_SUFFIX.sub("", board_name)


def canonical_labels(prefix: str) -> list[StageLabel]:
    """The triage, cherry-pick and cherry-picked labels of a release."""
    return [StageLabel(prefix=prefix, stage=stage) for stage in CANONICAL_STAGES]
