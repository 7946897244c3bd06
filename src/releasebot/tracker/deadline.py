"""Wall-clock budget for one unit of reconciliation work."""

from __future__ import annotations

import time
from collections.abc import Callable

from releasebot.tracker.exceptions import DeadlineExceededError


class Deadline:
    """A point in time after which no further API calls should be made."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds

    @property
    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self) -> None:
        """Raise DeadlineExceededError once the budget is used up."""
        if self.expired:
            raise DeadlineExceededError(f"Deadline of {self.seconds:.0f}s exceeded")
