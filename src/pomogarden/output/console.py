"""Rich Console factory and light/dark themes for pomogarden output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme as RichTheme

from pomogarden.domain.types import Theme

LIGHT_THEME = RichTheme(
    {
        "pomo.ok": "bold green",
        "pomo.error": "bold red",
        "pomo.warning": "bold yellow",
        "pomo.op": "bold cyan",
        "pomo.key": "dim",
        "pomo.id": "bold blue",
        "pomo.title": "bold",
        "pomo.clock": "bold black",
        "pomo.mode.focus": "green",
        "pomo.mode.short": "dark_cyan",
        "pomo.mode.long": "blue_violet",
        "pomo.ground": "dark_green",
        "pomo.sky": "deep_sky_blue4",
        "pomo.name": "italic",
    }
)

DARK_THEME = RichTheme(
    {
        "pomo.ok": "bold bright_green",
        "pomo.error": "bold bright_red",
        "pomo.warning": "bold bright_yellow",
        "pomo.op": "bold bright_cyan",
        "pomo.key": "grey62",
        "pomo.id": "bold bright_blue",
        "pomo.title": "bold white",
        "pomo.clock": "bold white",
        "pomo.mode.focus": "bright_green",
        "pomo.mode.short": "bright_cyan",
        "pomo.mode.long": "medium_purple1",
        "pomo.ground": "green3",
        "pomo.sky": "sky_blue1",
        "pomo.name": "italic grey85",
    }
)

_THEMES: dict[Theme, RichTheme] = {
    Theme.LIGHT: LIGHT_THEME,
    Theme.DARK: DARK_THEME,
}


def create_console(
    *,
    theme: Theme = Theme.LIGHT,
    no_color: bool = False,
    width: int | None = None,
) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        theme: Light or dark palette.
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=_THEMES[theme],
        no_color=no_color,
        highlight=False,
        width=width or 100,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_mode(mode: str) -> str:
    """Return the Rich style name for a timer mode."""
    return f"pomo.mode.{mode}" if mode in ("focus", "short", "long") else ""
