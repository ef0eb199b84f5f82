"""Cooperative, single-threaded scheduler for recurring callbacks.

Jobs fire from :meth:`CooperativeScheduler.run_pending` on the caller's
thread. A job that is overdue by several intervals fires once, not once
per missed interval, so late wake-ups never replay a backlog.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pomogarden.infrastructure.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class IntervalJob:
    """Handle for a recurring callback. Cancel to stop it."""

    interval: float
    callback: Callable[[], None] = field(repr=False)
    next_due: float
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class CooperativeScheduler:
    """Recurring jobs driven by an injected :class:`Clock`."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._jobs: list[IntervalJob] = []

    @property
    def jobs(self) -> list[IntervalJob]:
        """Active jobs in registration order."""
        return [job for job in self._jobs if job.active]

    def every(self, interval: float, callback: Callable[[], None]) -> IntervalJob:
        """Run *callback* every *interval* seconds until cancelled."""
        if interval <= 0:
            msg = f"Interval must be positive, got {interval!r}"
            raise ValueError(msg)
        job = IntervalJob(
            interval=interval,
            callback=callback,
            next_due=self._clock.now() + interval,
        )
        self._jobs.append(job)
        logger.debug("Scheduled job every %.3fs", interval)
        return job

    def run_pending(self) -> int:
        """Fire every due job once. Returns the number of callbacks run."""
        now = self._clock.now()
        fired = 0
        for job in list(self._jobs):
            if not job.active or job.next_due > now:
                continue
            job.next_due = now + job.interval
            job.callback()
            fired += 1
        self._jobs = [job for job in self._jobs if job.active]
        return fired

    def next_delay(self) -> float | None:
        """Seconds until the earliest active job is due, or None if idle."""
        active = self.jobs
        if not active:
            return None
        return max(0.0, min(job.next_due for job in active) - self._clock.now())

    def run_while(self, predicate: Callable[[], bool]) -> None:
        """Sleep and fire jobs until *predicate* is false or nothing is scheduled."""
        while predicate():
            self.run_pending()
            if not predicate():
                break
            delay = self.next_delay()
            if delay is None:
                break
            self._clock.sleep(delay)
