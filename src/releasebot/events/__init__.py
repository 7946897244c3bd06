"""Events - webhook deliveries turned into reconciliation jobs."""

from releasebot.events.dispatcher import DispatchStats, EventDispatcher, JobStatus
from releasebot.events.exceptions import DispatcherBusyError, EventError, EventPayloadError
from releasebot.events.handlers import HANDLERS, Reconcilers, handle
from releasebot.events.models import (
    BoardCreated,
    CardCreated,
    CardDeleted,
    CardMoved,
    Event,
    IssueOpened,
    LabelAdded,
    LabelRemoved,
)
from releasebot.events.parser import parse_event

__all__ = [
    "HANDLERS",
    "BoardCreated",
    "CardCreated",
    "CardDeleted",
    "CardMoved",
    "DispatchStats",
    "DispatcherBusyError",
    "Event",
    "EventDispatcher",
    "EventError",
    "EventPayloadError",
    "IssueOpened",
    "JobStatus",
    "LabelAdded",
    "LabelRemoved",
    "Reconcilers",
    "handle",
    "parse_event",
]
