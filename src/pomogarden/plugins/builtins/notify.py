"""Built-in notification plugin: terminal bell and completion alert.

Both side effects are best-effort. Output goes to stderr so that
``--json`` output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click
import pluggy

if TYPE_CHECKING:
    from pomogarden.infrastructure.workspace import Workspace

hookimpl = pluggy.HookimplMarker("pomogarden")

logger = logging.getLogger(__name__)


class NotifyPlugin:
    """Rings the bell and prints the translated alert when a cycle completes.

    Gated by the ``[ui]`` config section: ``bell`` and ``notify``.
    ``--quiet`` suppresses the alert text but not the bell.
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @hookimpl
    def on_cycle_completed(self, kind: str) -> None:
        settings = self._workspace.settings
        if settings.ui.bell:
            click.echo("\a", nl=False, err=True)
        if settings.ui.notify and not settings.quiet:
            t = self._workspace.translator
            click.echo(f"{t('title')}: {t(f'alert_{kind}')}", err=True)
        logger.debug("Completion notification sent for %s", kind)
