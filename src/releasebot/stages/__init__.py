"""Stage labels - the ``{release}/{stage}`` grammar and column mapping."""

from releasebot.stages.codec import (
    CANONICAL_STAGES,
    CHERRY_PICK,
    CHERRY_PICKED,
    STAGE_COLORS,
    STAGE_COLUMNS,
    STANDARD_COLUMNS,
    TRIAGE,
    StageLabel,
    canonical_labels,
    column_name_for,
    parse,
    release_prefix,
    render,
    stage_for,
)
from releasebot.stages.exceptions import MalformedLabelError, StageError

__all__ = [
    "CANONICAL_STAGES",
    "CHERRY_PICK",
    "CHERRY_PICKED",
    "STAGE_COLORS",
    "STAGE_COLUMNS",
    "STANDARD_COLUMNS",
    "TRIAGE",
    "MalformedLabelError",
    "StageError",
    "StageLabel",
    "canonical_labels",
    "column_name_for",
    "parse",
    "release_prefix",
    "render",
    "stage_for",
]
