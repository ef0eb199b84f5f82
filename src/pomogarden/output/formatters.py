"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output, colors, the
garden grid) or machines (--json). The formatter layer adapts
ServiceResult to the requested output mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from pomogarden.domain.locale import DEFAULT_LANGUAGE
from pomogarden.domain.types import Theme

if TYPE_CHECKING:
    from pomogarden.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How one result should be rendered."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    theme: Theme = Theme.LIGHT
    language: str = DEFAULT_LANGUAGE
    width: int | None = None


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON mode serializes the whole result; quiet mode prints a single
    line; otherwise the op-specific Rich renderer runs.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from pomogarden.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, settings=settings)
