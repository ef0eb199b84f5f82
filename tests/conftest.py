"""Shared pytest fixtures and test helpers for pomogarden tests."""

from __future__ import annotations

import json
import os
import random
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pluggy
import pytest
from click.testing import CliRunner

from pomogarden.config.settings import PomoSettings
from pomogarden.infrastructure.store import MemoryStore
from pomogarden.infrastructure.workspace import Workspace

hookimpl = pluggy.HookimplMarker("pomogarden")


class ManualClock:
    """Clock whose time only moves when told to; ``sleep`` advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += max(seconds, 0.0)

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordingPlugin:
    """Plugin that records every presentation hook and answers confirmations."""

    def __init__(self, answer: bool | None = None) -> None:
        self.answer = answer
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def payloads(self, hook: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.calls if name == hook]

    @hookimpl
    def on_tick(self, remaining_seconds: int, percent_complete: float) -> None:
        self.calls.append(
            ("on_tick", {"remaining_seconds": remaining_seconds, "percent": percent_complete})
        )

    @hookimpl
    def on_mode_changed(self, mode: str) -> None:
        self.calls.append(("on_mode_changed", {"mode": mode}))

    @hookimpl
    def on_status_changed(self, status: str) -> None:
        self.calls.append(("on_status_changed", {"status": status}))

    @hookimpl
    def on_cycle_completed(self, kind: str) -> None:
        self.calls.append(("on_cycle_completed", {"kind": kind}))

    @hookimpl
    def on_garden_changed(self, snapshot: Any) -> None:
        self.calls.append(("on_garden_changed", {"snapshot": snapshot}))

    @hookimpl
    def confirm_action(self, action: str, message: str) -> bool | None:
        self.calls.append(("confirm_action", {"action": action, "message": message}))
        return self.answer


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own POMOGARDEN_* variables out of every test."""
    for var in list(os.environ):
        if var.startswith("POMOGARDEN_"):
            monkeypatch.delenv(var)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Empty directory standing in for the user's data root."""
    root = tmp_path / "home"
    root.mkdir()
    return root


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def settings(data_root: Path) -> PomoSettings:
    """In-memory settings rooted at the temp data root."""
    return PomoSettings.from_cli(data_root=data_root, ephemeral=True, no_interact=True)


@pytest.fixture
def workspace(
    settings: PomoSettings, memory_store: MemoryStore, manual_clock: ManualClock
) -> Iterator[Workspace]:
    """Workspace over a memory store, manual clock and seeded rng.

    The event bus is not initialized; tests that need hooks call
    :func:`wire_recorder`.
    """
    ws = Workspace(settings, store=memory_store, clock=manual_clock, rng=random.Random(1234))
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_data_root(data_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the CLI at a temp data root and run from inside it.

    Use via ``@pytest.mark.usefixtures("_isolated_data_root")`` on command
    test classes.
    """
    monkeypatch.chdir(data_root)
    monkeypatch.setenv("POMOGARDEN_DATA_ROOT", str(data_root))


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def wire_recorder(ws: Workspace, answer: bool | None = None) -> RecordingPlugin:
    """Initialize the event bus (built-ins only) plus a recording plugin."""
    ws.init_event_bus(discover=False)
    recorder = RecordingPlugin(answer=answer)
    ws.register_plugin(recorder, name="recorder")
    return recorder


def garden_record(item_id: str, kind: str, glyph: str, **fields: Any) -> dict[str, Any]:
    """Raw persisted garden record, as the store would hold it."""
    return {"id": item_id, "kind": kind, "glyph": glyph, **fields}


def error_payload(stderr: str) -> dict[str, Any]:
    """The ``--json`` error document from stderr, skipping log lines before it."""
    return json.loads(stderr[stderr.index("{\n") :])
