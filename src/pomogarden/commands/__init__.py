"""Subcommand modules for pomogarden.

Provides register_commands() which uses deferred imports to keep
``pomogarden --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 2 standalone commands.
    """
    # --- Groups ---
    from pomogarden.commands.garden import garden
    from pomogarden.commands.timer import timer

    cli.add_command(timer)
    cli.add_command(garden)

    # --- Standalone commands ---
    from pomogarden.commands.prefs import lang, theme

    cli.add_command(theme)
    cli.add_command(lang)
