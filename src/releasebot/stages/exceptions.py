"""Custom exceptions for stage labels."""


class StageError(Exception):
    """Base exception for stage label errors."""


class MalformedLabelError(StageError):
    """Label is not of the form "{release}/{stage}"."""
