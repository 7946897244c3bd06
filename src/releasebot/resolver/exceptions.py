"""Custom exceptions for board and column resolution."""


class ResolverError(Exception):
    """Base exception for resolution errors."""


class BoardNotFoundError(ResolverError):
    """No board matches the requested release."""


class ColumnNotFoundError(ResolverError):
    """Board has no column with the requested name."""


class BoardExistsError(ResolverError):
    """A board with the requested name already exists."""
