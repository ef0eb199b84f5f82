"""TimerMachine — deadline-based interval timer.

While running, remaining time is always recomputed from an absolute
deadline, never decremented, so late or coalesced polls cannot make the
display drift from the clock. The machine raises presentation events
through the workspace event bus and never renders anything itself.

States are ``idle`` and ``running``. An idle machine whose countdown has
just run to zero is *expired* (:attr:`TimerMachine.expired`); starting it
again rewinds to the full duration of the current mode.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pomogarden.domain.modes import (
    MODE_DURATIONS,
    MODE_REWARDS,
    duration_seconds,
    format_clock,
    parse_mode,
    percent_complete,
    remaining_from_deadline,
    reward_for,
)
from pomogarden.domain.types import RewardKind, TimerMode, TimerStatus
from pomogarden.services.base import BaseService
from pomogarden.services.result import ServiceResult

if TYPE_CHECKING:
    from pomogarden.infrastructure.scheduler import IntervalJob
    from pomogarden.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)

PHASE_READY = "ready"
PHASE_GROWING = "growing"
PHASE_PAUSED = "paused"


class TimerMachine(BaseService):
    """Interval timer bound to one workspace.

    The periodic evaluation is a job on the workspace's cooperative
    scheduler; at most one is active at a time.
    """

    def __init__(self, workspace: Workspace, *, mode: TimerMode = TimerMode.FOCUS) -> None:
        super().__init__(workspace)
        self._poll_interval = workspace.settings.timer.poll_interval
        self._mode = mode
        # Precise seconds left while idle; the integer view is its ceiling.
        self._remaining: float = float(duration_seconds(mode))
        self._started_at: float | None = None
        self._deadline_at: float | None = None
        self._job: IntervalJob | None = None
        self._displayed = duration_seconds(mode)
        self._phase = PHASE_READY
        self._completed_cycles = 0
        self._last_reward: RewardKind | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def status(self) -> TimerStatus:
        return TimerStatus.RUNNING if self._deadline_at is not None else TimerStatus.IDLE

    @property
    def running(self) -> bool:
        return self._deadline_at is not None

    @property
    def phase(self) -> str:
        """Status line key suffix: ``ready``, ``growing`` or ``paused``."""
        return self._phase

    @property
    def started_at(self) -> float | None:
        return self._started_at

    @property
    def deadline_at(self) -> float | None:
        return self._deadline_at

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, rounded up."""
        if self._deadline_at is not None:
            return remaining_from_deadline(self._deadline_at, self._workspace.clock.now())
        return remaining_from_deadline(self._remaining, 0.0)

    @property
    def expired(self) -> bool:
        """Idle with nothing left: the countdown ran out and was not rewound."""
        return not self.running and self._remaining <= 0

    @property
    def completed_cycles(self) -> int:
        return self._completed_cycles

    @property
    def last_reward(self) -> RewardKind | None:
        """Reward kind of the most recent completed cycle, if any."""
        return self._last_reward

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the timer for results and renderers."""
        remaining = self.remaining_seconds
        return {
            "mode": self._mode.value,
            "status": self.status.value,
            "phase": self._phase,
            "running": self.running,
            "expired": self.expired,
            "remaining_seconds": remaining,
            "duration_seconds": duration_seconds(self._mode),
            "percent_complete": percent_complete(self._mode, remaining),
            "clock": format_clock(remaining),
            "completed_cycles": self._completed_cycles,
            "last_reward": self._last_reward.value if self._last_reward else None,
        }

    def state(self, op: str = "timer") -> ServiceResult:
        """Current snapshot wrapped as a result."""
        return ServiceResult(ok=True, op=op, data=self.snapshot())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> ServiceResult:
        """Begin (or resume) counting down. No-op while running."""
        op = "start"
        if self.running:
            return self.state(op)

        warnings: list[str] = []
        if self._remaining <= 0:
            self._remaining = float(duration_seconds(self._mode))

        now = self._workspace.clock.now()
        self._started_at = now
        self._deadline_at = now + self._remaining
        self._job = self._workspace.scheduler.every(self._poll_interval, self.poll)
        self._displayed = self.remaining_seconds
        logger.debug("Timer started: %s, %.3fs left", self._mode, self._remaining)

        self._set_phase(PHASE_GROWING, warnings)
        self._emit_tick(warnings)
        return ServiceResult(ok=True, op=op, data=self.snapshot(), warnings=warnings)

    def pause(self) -> ServiceResult:
        """Freeze the countdown. No-op unless running.

        A final evaluation runs first, so pausing at or after the deadline
        completes the cycle instead.
        """
        op = "pause"
        if not self.running:
            return self.state(op)

        self.poll()
        deadline = self._deadline_at
        if deadline is None:
            return ServiceResult(ok=True, op=op, data={**self.snapshot(), "completed": True})

        warnings: list[str] = []
        self._remaining = max(0.0, deadline - self._workspace.clock.now())
        self._stop()
        self._displayed = self.remaining_seconds
        logger.debug("Timer paused: %.3fs left", self._remaining)

        self._set_phase(PHASE_PAUSED, warnings)
        self._emit_tick(warnings)
        return ServiceResult(ok=True, op=op, data=self.snapshot(), warnings=warnings)

    def reset(self) -> ServiceResult:
        """Rewind to the full duration of the current mode, idle."""
        warnings: list[str] = []
        self._stop()
        self._remaining = float(duration_seconds(self._mode))
        self._displayed = self.remaining_seconds
        self._set_phase(PHASE_READY, warnings)
        self._emit_tick(warnings)
        return ServiceResult(ok=True, op="reset", data=self.snapshot(), warnings=warnings)

    def toggle(self) -> ServiceResult:
        """Pause when running, start otherwise."""
        return self.pause() if self.running else self.start()

    def set_mode(self, new_mode: str) -> ServiceResult:
        """Switch to *new_mode*, idle at its full duration.

        Switching away from a running countdown needs confirmation
        through the ``confirm_action`` hook; declining changes nothing.
        """
        op = "set_mode"
        mode = parse_mode(str(new_mode))
        if mode is None:
            logger.error("Unknown timer mode: %r", new_mode)
            return ServiceResult.rejected(
                op,
                "UNKNOWN_MODE",
                f"Unknown timer mode: {new_mode!r}",
                mode=str(new_mode),
            )

        if self.running and not self._confirm("set_mode", "mode_change_confirm"):
            logger.debug("Mode change to %s declined", mode)
            return ServiceResult(ok=True, op=op, data={**self.snapshot(), "aborted": True})

        warnings: list[str] = []
        self._stop()
        self._mode = mode
        self._remaining = float(duration_seconds(mode))
        self._displayed = self.remaining_seconds
        logger.debug("Timer mode set to %s", mode)

        self._dispatch_event("on_mode_changed", {"mode": mode.value}, warnings)
        self._set_phase(PHASE_READY, warnings)
        self._emit_tick(warnings)
        return ServiceResult(ok=True, op=op, data=self.snapshot(), warnings=warnings)

    def poll(self) -> None:
        """Periodic evaluation. Safe to call late, early, or repeatedly."""
        if self._deadline_at is None:
            return
        remaining = remaining_from_deadline(self._deadline_at, self._workspace.clock.now())
        if remaining <= 0:
            self._complete()
            return
        if remaining != self._displayed:
            self._displayed = remaining
            self._emit_tick([])

    def wait(self) -> None:
        """Drive the scheduler until the countdown stops running."""
        self._workspace.scheduler.run_while(lambda: self.running)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        self._stop()
        self._remaining = 0.0
        self._displayed = 0
        self._completed_cycles += 1
        kind = reward_for(self._mode)
        self._last_reward = kind
        logger.debug("Cycle completed: %s -> %s", self._mode, kind)

        warnings: list[str] = []
        self._emit_tick(warnings)
        self._set_phase(PHASE_READY, warnings)
        self._dispatch_event("on_cycle_completed", {"kind": kind.value}, warnings)
        for warning in warnings:
            logger.debug("Completion side effect: %s", warning)

    def _stop(self) -> None:
        if self._job is not None:
            self._job.cancel()
            self._job = None
        self._started_at = None
        self._deadline_at = None

    def _set_phase(self, phase: str, warnings: list[str]) -> None:
        self._phase = phase
        self._dispatch_event("on_status_changed", {"status": phase}, warnings)

    def _emit_tick(self, warnings: list[str]) -> None:
        remaining = self._displayed
        payload = {
            "remaining_seconds": remaining,
            "percent_complete": percent_complete(self._mode, remaining),
        }
        self._dispatch_event("on_tick", payload, warnings)


def list_modes() -> ServiceResult:
    """Every mode with its fixed duration and reward."""
    modes = [
        {
            "mode": mode.value,
            "duration_seconds": seconds,
            "clock": format_clock(seconds),
            "reward": MODE_REWARDS[mode].value,
        }
        for mode, seconds in MODE_DURATIONS.items()
    ]
    return ServiceResult(ok=True, op="modes", data={"modes": modes})
