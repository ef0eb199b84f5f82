"""Pluggy hook specifications for the presentation boundary.

The timer and garden call these hooks unconditionally; whether anything
listens is the plugin manager's business. Five notification hooks are
fire-and-forget. ``confirm_action`` is a ``firstresult`` question whose
first non-None answer wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pomogarden.services.garden import GardenSnapshot

hookspec = pluggy.HookspecMarker("pomogarden")


class PomogardenHookSpec:
    """Hook specifications for the pomogarden plugin system."""

    @hookspec
    def on_tick(self, remaining_seconds: int, percent_complete: float) -> None:
        """Called when the displayed remaining time changes."""

    @hookspec
    def on_mode_changed(self, mode: str) -> None:
        """Called after the timer switches to another mode."""

    @hookspec
    def on_status_changed(self, status: str) -> None:
        """Called with ``ready``, ``growing`` or ``paused``."""

    @hookspec
    def on_cycle_completed(self, kind: str) -> None:
        """Called once per countdown that runs to zero, with its reward kind."""

    @hookspec
    def on_garden_changed(self, snapshot: GardenSnapshot) -> None:
        """Called after the garden was mutated, with a fresh snapshot."""

    @hookspec(firstresult=True)
    def confirm_action(self, action: str, message: str) -> bool | None:
        """Return True to proceed, False to decline, None to abstain."""
