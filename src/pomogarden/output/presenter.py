"""TerminalPresenter — the click/Rich side of the presentation hooks.

Registered on the workspace event bus by the CLI. It redraws a single
status line on every tick, prints the garden when it changes, and
answers confirmation requests with ``click.confirm`` (or declines them
under ``--no-interact``). Machine-readable modes stay silent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import pluggy

from pomogarden.domain.modes import format_clock
from pomogarden.output.renderers import progress_bar, render_garden

if TYPE_CHECKING:
    from pomogarden.domain.locale import Translator
    from pomogarden.output.formatters import OutputSettings
    from pomogarden.services.garden import GardenSnapshot

hookimpl = pluggy.HookimplMarker("pomogarden")


class TerminalPresenter:
    """Presentation plugin writing to the terminal via click."""

    def __init__(
        self,
        settings: OutputSettings,
        translator: Translator,
        *,
        interactive: bool = True,
    ) -> None:
        self._settings = settings
        self._t = translator
        self._interactive = interactive
        self._status = "ready"
        self._line_open = False

    @property
    def _silent(self) -> bool:
        return self._settings.json_output or self._settings.quiet

    @hookimpl
    def on_tick(self, remaining_seconds: int, percent_complete: float) -> None:
        if self._silent:
            return
        line = (
            f"{format_clock(remaining_seconds)}  {progress_bar(percent_complete)} "
            f"{percent_complete:5.1f}%  {self._t(f'status_{self._status}')}"
        )
        click.echo(f"\r{line}\x1b[K", nl=False)
        self._line_open = True

    @hookimpl
    def on_status_changed(self, status: str) -> None:
        self._status = status

    @hookimpl
    def on_mode_changed(self, mode: str) -> None:
        if self._silent:
            return
        self._close_line()
        click.echo(self._t(f"mode_{mode}"))

    @hookimpl
    def on_cycle_completed(self, kind: str) -> None:
        self._close_line()

    @hookimpl
    def on_garden_changed(self, snapshot: GardenSnapshot) -> None:
        if self._silent:
            return
        self._close_line()
        click.echo(render_garden(snapshot.model_dump(mode="json"), settings=self._settings))

    @hookimpl
    def confirm_action(self, action: str, message: str) -> bool | None:
        if not self._interactive:
            return False
        self._close_line()
        return click.confirm(message, default=False, err=True)

    def _close_line(self) -> None:
        if self._line_open:
            click.echo()
            self._line_open = False
