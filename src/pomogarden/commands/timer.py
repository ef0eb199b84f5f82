"""Command group: run countdowns and inspect the timer modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pomogarden.commands._base import PomoGroup

if TYPE_CHECKING:
    from pomogarden.commands._context import AppContext

_TIMER_EXAMPLES = """\
  pomogarden timer run
  pomogarden timer run --mode short
  pomogarden timer modes"""


@click.group(cls=PomoGroup, examples=_TIMER_EXAMPLES)
@click.pass_obj
def timer(app: AppContext) -> None:
    """Count down focus and break intervals."""


@timer.command(
    examples="""\
  pomogarden timer run
  pomogarden timer run --mode long
  pomogarden --json timer run --mode short"""
)
@click.option(
    "--mode",
    "mode",
    default="focus",
    show_default=True,
    help="Interval to run: focus, short or long.",
)
@click.pass_obj
def run(app: AppContext, mode: str) -> None:
    """Run one countdown in the terminal; Ctrl+C pauses and exits.

    A countdown that runs to zero grows its reward in the garden:
    focus a tree, short a flower, long a butterfly.
    """
    from pomogarden.services.timer import TimerMachine

    machine = TimerMachine(app.workspace)
    selected = machine.set_mode(mode)
    if not selected.ok:
        app.emit(selected)
        return

    machine.start()
    try:
        machine.wait()
    except KeyboardInterrupt:
        app.emit(machine.pause())
        return
    app.emit(machine.state("timer_run"))


@timer.command(
    examples="""\
  pomogarden timer modes
  pomogarden --json timer modes"""
)
@click.pass_obj
def modes(app: AppContext) -> None:
    """List the modes with their durations and rewards."""
    from pomogarden.services.timer import list_modes

    app.emit(list_modes())
