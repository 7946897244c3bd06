"""Exceptions for the reconcilers."""


class ReconcilerError(Exception):
    """Base exception for reconciler errors."""


class ProvisioningTimeoutError(ReconcilerError):
    """A new board did not get its standard columns in time."""
