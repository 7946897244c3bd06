"""Custom exceptions for the tracker client."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for GitHub API errors.

    Attributes:
        status_code: HTTP status of the failed response, if there was one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TrackerNotFoundError(TrackerError):
    """Resource does not exist (404)."""


class TrackerValidationError(TrackerError):
    """Request rejected as invalid, e.g. a card that already exists (422)."""


class DeadlineExceededError(Exception):
    """A job used up its wall-clock budget before finishing its API calls."""
