"""release-bot - keeps release board columns and stage labels in agreement."""

__version__ = "0.1.0"
