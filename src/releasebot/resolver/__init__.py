"""Resolvers - locate release boards and their columns."""

from releasebot.resolver.boards import BoardResolver, BoardScope, board_description
from releasebot.resolver.columns import ColumnResolver
from releasebot.resolver.exceptions import (
    BoardExistsError,
    BoardNotFoundError,
    ColumnNotFoundError,
    ResolverError,
)

__all__ = [
    "BoardExistsError",
    "BoardNotFoundError",
    "BoardResolver",
    "BoardScope",
    "ColumnNotFoundError",
    "ColumnResolver",
    "ResolverError",
    "board_description",
]
