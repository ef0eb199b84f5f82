"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Workspace initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING, Any

import click

from pomogarden.infrastructure.clock import SystemClock
from pomogarden.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pomogarden.config.settings import PomoSettings
    from pomogarden.infrastructure.workspace import Workspace
    from pomogarden.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The workspace is lazily
    initialized on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: PomoSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from pomogarden.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily on first access).

        The event bus is wired with the built-in plugins plus a
        :class:`TerminalPresenter` for this invocation's output mode.
        """
        if self._workspace is None:
            from pomogarden.infrastructure.workspace import Workspace
            from pomogarden.output.presenter import TerminalPresenter

            workspace = Workspace(self.settings, clock=SystemClock())
            workspace.viewport_width = shutil.get_terminal_size().columns
            workspace.init_event_bus()
            self._workspace = workspace
            presenter = TerminalPresenter(
                self.output_settings(),
                workspace.translator,
                interactive=not self.settings.no_interact,
            )
            workspace.register_plugin(presenter, name="terminal-presenter")
        return self._workspace

    def output_settings(self) -> OutputSettings:
        """Output mode from the CLI flags plus the stored preferences."""
        theme_kwargs: dict[str, Any] = {}
        if self._workspace is not None:
            from pomogarden.services.preferences import PreferencesService

            prefs = PreferencesService(self._workspace)
            theme_kwargs = {"theme": prefs.theme(), "language": prefs.language()}
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            width=self._workspace.viewport_width if self._workspace else None,
            **theme_kwargs,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings()
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Release the workspace, if one was created."""
        if self._workspace is not None:
            self._workspace.close()
            self._workspace = None
