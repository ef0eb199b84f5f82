"""Classification enums for timer modes, rewards, and preferences."""

from __future__ import annotations

from enum import StrEnum


class TimerMode(StrEnum):
    """Interval kinds the timer can count down."""

    FOCUS = "focus"
    SHORT = "short"
    LONG = "long"


class TimerStatus(StrEnum):
    """Machine status of the interval timer."""

    IDLE = "idle"
    RUNNING = "running"


class RewardKind(StrEnum):
    """Garden item categories granted for completed cycles."""

    TREE = "tree"
    FLOWER = "flower"
    BUTTERFLY = "butterfly"


class Theme(StrEnum):
    """Binary light/dark display flag."""

    LIGHT = "light"
    DARK = "dark"
