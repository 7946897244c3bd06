"""Migration - priority-ordered transfer of cards between release boards."""

from releasebot.migration.exceptions import MigrationError
from releasebot.migration.migrator import CREATION_ORDER, DELETION_ORDER, CardMigrator
from releasebot.migration.models import CardMove, ColumnPlan, MigrationResult, Priority

__all__ = [
    "CREATION_ORDER",
    "DELETION_ORDER",
    "CardMigrator",
    "CardMove",
    "ColumnPlan",
    "MigrationError",
    "MigrationResult",
    "Priority",
]
