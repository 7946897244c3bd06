"""Exceptions for card migration."""


class MigrationError(Exception):
    """Base exception for migration errors."""
