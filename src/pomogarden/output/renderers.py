"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pomogarden.domain.locale import Translator
from pomogarden.domain.modes import MODE_DURATIONS, MODE_REWARDS, format_clock
from pomogarden.domain.placement import SkyGrid, percent_to_sky_cell
from pomogarden.output.console import create_console, get_output, style_for_mode

if TYPE_CHECKING:
    from rich.console import Console

    from pomogarden.output.formatters import OutputSettings
    from pomogarden.services.result import ServiceResult

PROGRESS_WIDTH = 30


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, settings: OutputSettings) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(theme=settings.theme, width=settings.width)
    t = Translator(settings.language)

    if not result.ok:
        _render_error(result, console, t, verbose=settings.verbose)
    elif result.aborted:
        _render_aborted(result, console, t, verbose=settings.verbose)
    else:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, t, verbose=settings.verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.aborted:
        return f"ABORTED: {result.op}"
    d = result.data
    if "clock" in d:
        return str(d["clock"])
    if "id" in d:
        return str(d["id"])
    return f"OK: {result.op}"


def render_garden(garden: dict[str, Any], *, settings: OutputSettings) -> str:
    """Render a serialized :class:`GardenSnapshot` on its own."""
    console = create_console(theme=settings.theme, width=settings.width)
    console.print(_garden_panel(garden, Translator(settings.language), verbose=settings.verbose))
    return get_output(console).rstrip("\n")


def progress_bar(percent: float, width: int = PROGRESS_WIDTH) -> str:
    """Fixed-width text progress bar for *percent* (0–100)."""
    filled = round(max(0.0, min(percent, 100.0)) / 100 * width)
    return "█" * filled + "░" * (width - filled)


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="pomo.ok")
    op = Text(f"  {result.op}", style="pomo.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pomo.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="pomo.id")
    elif key == "name":
        v = Text(str(value), style="pomo.name")
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


# ── Error / aborted ───────────────────────────────────────────────────


def _render_error(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pomo.error")
    op = Text(f"  {result.op}", style="pomo.op")
    dash = Text(" — ")
    console.print(label, op, dash, msg, sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_aborted(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    label = Text("ABORTED", style="pomo.warning")
    console.print(label, Text(f"  {result.op}", style="pomo.op"), sep="")
    if verbose and "mode" in result.data:
        _render_timer(result, console, t, verbose=verbose)


# ── Timer renderers ───────────────────────────────────────────────────


def _render_timer(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Render a timer snapshot: mode, clock, status line, progress."""
    d = result.data
    mode = str(d.get("mode", ""))
    mode_text = Text(t(f"mode_{mode}"), style=style_for_mode(mode))
    clock = Text(str(d.get("clock", "")), style="pomo.clock")
    console.print(mode_text, Text("  "), clock)
    console.print(Text(t(f"status_{d.get('phase', 'ready')}"), style="dim"))
    percent = float(d.get("percent_complete", 0.0))
    console.print(f"{progress_bar(percent)} {percent:5.1f}%")
    if verbose:
        _field(console, "status", d.get("status"))
        _field(console, "remaining_seconds", d.get("remaining_seconds"))
        _field(console, "completed_cycles", d.get("completed_cycles"))


def _render_modes(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Render the mode table (name, label, duration, reward)."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Mode", style="pomo.op", no_wrap=True)
    table.add_column("Label")
    table.add_column("Duration", justify="right")
    table.add_column("Reward")
    for mode, seconds in MODE_DURATIONS.items():
        table.add_row(
            Text(mode.value, style=style_for_mode(mode.value)),
            t(f"mode_{mode.value}"),
            format_clock(seconds),
            MODE_REWARDS[mode].value,
        )
    console.print(table)


# ── Garden renderers ──────────────────────────────────────────────────


def _ground_table(garden: dict[str, Any], *, verbose: bool = False) -> Table:
    """Build the ground grid: one table cell per ``(col, row)``."""
    columns = int(garden.get("columns", 1))
    rows = int(garden.get("rows", 0))
    cells: dict[tuple[int, int], dict[str, Any]] = {}
    for item in garden.get("items", []):
        if item.get("kind") in ("tree", "flower") and item.get("col") and item.get("row"):
            cells[(item["col"], item["row"])] = item

    table = Table(show_header=False, show_lines=True, expand=False, border_style="pomo.ground")
    for _ in range(columns):
        table.add_column(justify="center", min_width=6)
    for row in range(1, rows + 1):
        rendered: list[Text] = []
        for col in range(1, columns + 1):
            item = cells.get((col, row))
            text = Text()
            if item is not None:
                text.append(str(item["glyph"]))
                if item.get("name"):
                    text.append(f"\n{item['name']}", style="pomo.name")
                if verbose and item.get("fruits"):
                    text.append("\n" + "".join(item["fruits"]))
            rendered.append(text)
        table.add_row(*rendered)
    return table


def _sky_lines(garden: dict[str, Any]) -> list[str]:
    """Lay butterflies onto the virtual sky grid, one glyph per cell."""
    grid = SkyGrid(cols=int(garden.get("sky_cols", 6)), rows=int(garden.get("sky_rows", 4)))
    marks: dict[tuple[int, int], str] = {}
    for item in garden.get("items", []):
        if item.get("kind") != "butterfly" or item.get("left") is None:
            continue
        marks[percent_to_sky_cell(item["left"], item["top"], grid)] = str(item["glyph"])
    if not marks:
        return []
    lines: list[str] = []
    for row in range(1, grid.rows + 1):
        lines.append("".join(marks.get((col, row), "  ") for col in range(1, grid.cols + 1)))
    return [line.rstrip() for line in lines]


def _garden_panel(garden: dict[str, Any], t: Translator, *, verbose: bool = False) -> Panel:
    """Sky above ground, with the counters, inside a titled panel."""
    parts: list[Any] = []
    sky = _sky_lines(garden)
    if sky:
        parts.append(Text("\n".join(sky), style="pomo.sky"))
    if garden.get("rows"):
        parts.append(_ground_table(garden, verbose=verbose))
    counts = (
        f"{t('plants_label')}: {garden.get('plant_count', 0)}   "
        f"{t('butterflies_label')}: {garden.get('butterfly_count', 0)}"
    )
    parts.append(Text(counts, style="pomo.key"))
    return Panel(Group(*parts), title=t("garden_title"), border_style="pomo.ground", expand=False)


def _item_table(items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table listing every item with its resolved position."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="pomo.id", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Glyph")
    table.add_column("Position")
    table.add_column("Name", style="pomo.name")
    for item in items:
        if item.get("kind") == "butterfly":
            position = f"{item.get('left') or 0:.1f}%, {item.get('top') or 0:.1f}%"
        else:
            position = f"{item.get('col')},{item.get('row')}"
        table.add_row(
            str(item.get("id", "")),
            str(item.get("kind", "")),
            str(item.get("glyph", "")),
            position,
            str(item.get("name") or ""),
        )
    return table


def _render_garden(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Render a full garden snapshot inside a titled panel."""
    console.print(_garden_panel(result.data, t, verbose=verbose))
    if verbose:
        console.print(_item_table(result.data.get("items", [])))


def _render_reward(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Render a granted reward followed by the updated garden."""
    _status_line(console, result)
    for key in ("id", "kind", "glyph"):
        if key in result.data:
            _field(console, key, result.data[key])
    garden = result.data.get("garden")
    if garden:
        console.print(_garden_panel(garden, t, verbose=verbose))


# ── Preferences / mutations ───────────────────────────────────────────


def _render_theme(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    theme = str(result.data.get("theme", ""))
    console.print(Text(t(f"theme_{theme}")), Text(f"  ({theme})", style="pomo.key"))


def _render_language(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "language", result.data.get("language"))
    if verbose and "supported" in result.data:
        _field(console, "supported", ", ".join(result.data["supported"]))


def _render_mutation(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Render rename/clear results."""
    _status_line(console, result)
    for key in ("id", "glyph", "name", "removed"):
        if key in result.data:
            _field(console, key, result.data[key] if result.data[key] is not None else "—")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult, console: Console, t: Translator, *, verbose: bool = False
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":"), ensure_ascii=False))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Timer
    "start": _render_timer,
    "pause": _render_timer,
    "reset": _render_timer,
    "set_mode": _render_timer,
    "timer": _render_timer,
    "timer_run": _render_timer,
    "modes": _render_modes,
    # Garden
    "garden": _render_garden,
    "add_reward": _render_reward,
    "rename_tree": _render_mutation,
    "clear_garden": _render_mutation,
    # Preferences
    "theme": _render_theme,
    "set_theme": _render_theme,
    "toggle_theme": _render_theme,
    "language": _render_language,
    "set_language": _render_language,
}
