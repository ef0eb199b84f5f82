"""Entry point: the ``pomogarden`` command group and its global flags."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from pomogarden import __version__
from pomogarden.commands import register_commands
from pomogarden.commands._context import AppContext
from pomogarden.config.settings import PomoSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pomogarden")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON on stdout.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the clock, an id, or OK.")
@click.option("-v", "--verbose", is_flag=True, help="Show every field and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("--no-interact", is_flag=True, help="Never prompt; confirmations are declined.")
@click.option("-c", "--config", "config_path", default=None, help="Read this pomogarden.toml.")
@click.option(
    "--data-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .pomogarden/ (default: config dir, else home).",
)
@click.option("--ephemeral", is_flag=True, help="Keep the garden in memory for this run only.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, data_root: Path | None, **flags: Any) -> None:
    """pomogarden — a Pomodoro timer that grows a garden.

    Finish a focus interval to plant a tree, a short break for a flower,
    and a long break for a butterfly.
    """
    settings = PomoSettings.from_cli(config_path=config_path, data_root=data_root, **flags)
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
