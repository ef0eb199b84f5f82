"""Standalone commands: theme flag and interface language."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pomogarden.commands._base import PomoCommand

if TYPE_CHECKING:
    from pomogarden.commands._context import AppContext


@click.command(
    cls=PomoCommand,
    examples="""\
  pomogarden theme
  pomogarden theme dark
  pomogarden theme toggle""",
)
@click.argument("value", required=False, default=None)
@click.pass_obj
def theme(app: AppContext, value: str | None) -> None:
    """Show the theme, or set it to light, dark, or toggle it."""
    from pomogarden.services.preferences import PreferencesService

    svc = PreferencesService(app.workspace)
    if value is None:
        app.emit(svc.get_theme())
    elif value == "toggle":
        app.emit(svc.toggle_theme())
    else:
        app.emit(svc.set_theme(value))


@click.command(
    cls=PomoCommand,
    examples="""\
  pomogarden lang
  pomogarden lang en""",
)
@click.argument("value", required=False, default=None)
@click.pass_obj
def lang(app: AppContext, value: str | None) -> None:
    """Show the interface language, or set it (es, pt, en)."""
    from pomogarden.services.preferences import PreferencesService

    svc = PreferencesService(app.workspace)
    app.emit(svc.get_language() if value is None else svc.set_language(value))
