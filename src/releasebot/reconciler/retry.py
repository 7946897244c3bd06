"""Bounded polling policy."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger("releasebot.reconciler.retry")


@dataclass(frozen=True)
class RetryPolicy:
    """Check once, then retry up to ``retries`` times ``interval`` seconds apart.

    Attributes:
        retries: Extra checks after the first one.
        interval: Seconds slept between checks.
        sleep: Sleep function, replaceable in tests.
    """

    retries: int = 3
    interval: float = 5.0
    sleep: Callable[[float], None] = time.sleep

    def poll(self, check: Callable[[], T], done: Callable[[T], bool]) -> tuple[bool, T]:
        """Call ``check`` until ``done`` accepts its value or retries run out.

        Returns:
            Whether ``done`` accepted the last value, and that value.
        """
        value = check()
        attempt = 0
        while not done(value) and attempt < self.retries:
            attempt += 1
            logger.debug(
                "Retry %d/%d in %.1fs (last value: %r)", attempt, self.retries, self.interval, value
            )
            self.sleep(self.interval)
            value = check()
        return done(value), value
