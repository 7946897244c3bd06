"""Tracker client - GitHub issues, labels and classic project boards."""

from releasebot.tracker.client import TrackerClient
from releasebot.tracker.deadline import Deadline
from releasebot.tracker.exceptions import (
    DeadlineExceededError,
    TrackerError,
    TrackerNotFoundError,
    TrackerValidationError,
)
from releasebot.tracker.models import Board, Card, Column, Issue, Label, Repository

__all__ = [
    "Board",
    "Card",
    "Column",
    "Deadline",
    "DeadlineExceededError",
    "Issue",
    "Label",
    "Repository",
    "TrackerClient",
    "TrackerError",
    "TrackerNotFoundError",
    "TrackerValidationError",
]
