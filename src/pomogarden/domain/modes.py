"""Mode table: fixed durations and the reward each mode grants.

INVARIANT: Durations are fixed per mode and never configurable.
"""

from __future__ import annotations

import math

from pomogarden.domain.types import RewardKind, TimerMode

MODE_DURATIONS: dict[TimerMode, int] = {
    TimerMode.FOCUS: 25 * 60,
    TimerMode.SHORT: 5 * 60,
    TimerMode.LONG: 15 * 60,
}

MODE_REWARDS: dict[TimerMode, RewardKind] = {
    TimerMode.FOCUS: RewardKind.TREE,
    TimerMode.SHORT: RewardKind.FLOWER,
    TimerMode.LONG: RewardKind.BUTTERFLY,
}


def parse_mode(value: str) -> TimerMode | None:
    """Return the :class:`TimerMode` for *value*, or None if unknown."""
    try:
        return TimerMode(value)
    except ValueError:
        return None


def duration_seconds(mode: TimerMode) -> int:
    """Full countdown length for *mode* in seconds."""
    return MODE_DURATIONS[mode]


def reward_for(mode: TimerMode) -> RewardKind:
    """Reward kind granted when a *mode* cycle completes."""
    return MODE_REWARDS[mode]


def remaining_from_deadline(deadline: float, now: float) -> int:
    """Whole seconds left until *deadline*, rounded up and floored at zero.

    Rounding up keeps the display from reaching ``00:00`` before the
    deadline has actually passed.
    """
    return max(0, math.ceil(deadline - now))


def percent_complete(mode: TimerMode, remaining: int) -> float:
    """Progress of the current countdown as a 0–100 percentage."""
    total = duration_seconds(mode)
    return (total - remaining) / total * 100


def format_clock(seconds: int) -> str:
    """Format *seconds* as ``MM:SS`` (minutes may exceed two digits)."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
