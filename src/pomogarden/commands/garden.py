"""Command group: look at and tend the garden."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pomogarden.commands._base import PomoGroup

if TYPE_CHECKING:
    from pomogarden.commands._context import AppContext

_GARDEN_EXAMPLES = """\
  pomogarden garden show
  pomogarden garden add flower
  pomogarden garden name 018f3a2b9c1d-7f3a2c "Old Oak"
  pomogarden garden clear --yes"""


@click.group(cls=PomoGroup, examples=_GARDEN_EXAMPLES)
@click.pass_obj
def garden(app: AppContext) -> None:
    """Show and tend the rewards grown so far."""


@garden.command(
    examples="""\
  pomogarden garden show
  pomogarden -v garden show
  pomogarden --json garden show"""
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Render the garden: sky, ground grid, and counters."""
    from pomogarden.services.garden import GardenService

    app.emit(GardenService(app.workspace).show())


@garden.command(
    examples="""\
  pomogarden garden add tree
  pomogarden garden add butterfly"""
)
@click.argument("kind")
@click.pass_obj
def add(app: AppContext, kind: str) -> None:
    """Grant a reward by hand (tree, flower or butterfly)."""
    from pomogarden.services.garden import GardenService

    app.emit(GardenService(app.workspace).add_reward(kind))


@garden.command(
    "name",
    examples="""\
  pomogarden garden name 018f3a2b9c1d-7f3a2c "Old Oak"
  pomogarden garden name 018f3a2b9c1d-7f3a2c"""
)
@click.argument("item_id")
@click.argument("name", required=False, default=None)
@click.pass_obj
def name_tree(app: AppContext, item_id: str, name: str | None) -> None:
    """Name a tree; omit NAME to clear it."""
    from pomogarden.services.garden import GardenService

    app.emit(GardenService(app.workspace).rename_tree(item_id, name))


@garden.command(
    examples="""\
  pomogarden garden clear
  pomogarden garden clear --yes"""
)
@click.option("--yes", "yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def clear(app: AppContext, yes: bool) -> None:
    """Remove every item from the garden. Cannot be undone."""
    from pomogarden.services.garden import GardenService

    app.emit(GardenService(app.workspace).clear(confirmed=True if yes else None))
