"""Exceptions for inbound events."""


class EventError(Exception):
    """Base exception for event errors."""


class EventPayloadError(EventError):
    """Webhook payload is missing fields its event type requires."""


class DispatcherBusyError(EventError):
    """Too many events are waiting; the delivery is refused."""
