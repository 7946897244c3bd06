"""EventDispatcher - runs event reconciliations on a bounded worker pool."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum

from releasebot.events.exceptions import DispatcherBusyError
from releasebot.events.handlers import Reconcilers, handle
from releasebot.events.models import Event
from releasebot.tracker import Deadline, DeadlineExceededError, TrackerClient

logger = logging.getLogger("releasebot.events.dispatcher")


class JobStatus(str, Enum):
    """Final status of one event job."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class DispatchStats:
    """Counters over every event submitted to a dispatcher."""

    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    rejected: int = 0

    @property
    def pending(self) -> int:
        return self.submitted - self.succeeded - self.failed - self.timed_out


class EventDispatcher:
    """Reconciles each event as its own job on a fixed-size thread pool.

    Jobs share nothing but the tracker's connection pool. Each job gets a
    tracker scoped to a fresh deadline, so a job that runs past ``timeout``
    stops at its next API call. Work already sent to GitHub is not undone.
    """

    def __init__(
        self,
        tracker: TrackerClient,
        max_workers: int = 8,
        timeout: float = 300.0,
        max_pending: int = 1000,
        reconcilers_factory: Callable[[TrackerClient], Reconcilers] = Reconcilers.for_tracker,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            tracker: Root tracker client; jobs use scoped copies of it.
            max_workers: Maximum number of events reconciled at once.
            timeout: Wall-clock seconds each event may take.
            max_pending: Queued or running events above which submissions
                are refused.
            reconcilers_factory: Builds a job's reconcilers from its tracker.
        """
        self.tracker = tracker
        self.max_workers = max_workers
        self.timeout = timeout
        self.max_pending = max_pending
        self._reconcilers_factory = reconcilers_factory
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="releasebot"
        )
        self._stats = DispatchStats()
        self._lock = threading.Lock()

    def submit(self, event: Event) -> Future[JobStatus]:
        """Queue an event for reconciliation.

        Returns:
            Future resolving to the job's final status. It never raises; a
            failed job is logged and reported as FAILED.

        Raises:
            DispatcherBusyError: If ``max_pending`` events are already waiting
        """
        with self._lock:
            if self._stats.pending >= self.max_pending:
                self._stats.rejected += 1
                raise DispatcherBusyError(
                    f"{self._stats.pending} events pending; refusing {type(event).__name__}"
                )
            self._stats.submitted += 1
        logger.info("Queued %s for %s", type(event).__name__, event.repo.full_name)
        return self._executor.submit(self._run, event)

    def _run(self, event: Event) -> JobStatus:
        name = type(event).__name__
        tracker = self.tracker.scoped(Deadline(self.timeout))
        try:
            result = handle(self._reconcilers_factory(tracker), event)
        except DeadlineExceededError:
            logger.error(
                "%s for %s abandoned after %.0fs", name, event.repo.full_name, self.timeout
            )
            status = JobStatus.TIMED_OUT
        except Exception as e:  # noqa: BLE001
            logger.exception("%s for %s failed: %s", name, event.repo.full_name, e)
            status = JobStatus.FAILED
        else:
            logger.debug("%s for %s done: %r", name, event.repo.full_name, result)
            status = JobStatus.SUCCEEDED

        self._record(status)
        return status

    def _record(self, status: JobStatus) -> None:
        with self._lock:
            if status is JobStatus.SUCCEEDED:
                self._stats.succeeded += 1
            elif status is JobStatus.TIMED_OUT:
                self._stats.timed_out += 1
            else:
                self._stats.failed += 1

    def stats(self) -> DispatchStats:
        """Snapshot of the dispatcher's counters."""
        with self._lock:
            return replace(self._stats)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events; optionally wait for queued ones to finish."""
        logger.info("Shutting down event dispatcher (wait=%s)", wait)
        self._executor.shutdown(wait=wait)
