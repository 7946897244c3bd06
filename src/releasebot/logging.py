"""Logging setup for the webhook server and the batch commands.

Everything logs under the ``releasebot`` logger tree to stderr. The server
also keeps a rotating ``releasebot.log``; the batch commands only do when a
log directory is configured.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = "releasebot.log"
LOG_FILE_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# GitHub tokens and webhook signatures that may be echoed in API error bodies
_SECRETS = (
    (re.compile(r"\b(ghp|gho|ghs|ghu)_[A-Za-z0-9]{36}\b"), "[GITHUB_TOKEN]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{82}\b"), "[GITHUB_TOKEN]"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"\bsha(1|256)=[a-f0-9]+"), r"sha\1=[REDACTED]"),
)


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> logging.Logger:
    """Route the ``releasebot`` loggers to stderr and, given a directory, a file.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Level name, e.g. "DEBUG".
        log_dir: Directory for ``releasebot.log``; created when missing.

    Returns:
        The ``releasebot`` logger.
    """
    logger = logging.getLogger("releasebot")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path / LOG_FILE,
                maxBytes=LOG_FILE_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging at %s to %s", level, log_dir or "stderr only")
    return logger


def redact(text: str) -> str:
    """Mask GitHub tokens and webhook signatures."""
    for pattern, replacement in _SECRETS:
        text = pattern.sub(replacement, text)
    return text


def summarize_response(text: str, limit: int = 500) -> str:
    """A GitHub error body shortened to ``limit`` characters, secrets masked."""
    if len(text) > limit:
        text = f"{text[:limit]}... [{len(text) - limit} more chars]"
    return redact(text)
