"""Locating and reading ``pomogarden.toml``.

Precedence: ``--config`` → ``POMOGARDEN_CONFIG`` → the first
``pomogarden.toml`` found walking up from the start directory.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from pomogarden.config.models import PomoConfig

CONFIG_FILENAME = "pomogarden.toml"
CONFIG_ENV_VAR = "POMOGARDEN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), if any.

    A ``POMOGARDEN_CONFIG`` pointing at a missing file disables the
    walk-up rather than falling back to it.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(config_path: str | None, start: Path | None = None) -> Path | None:
    """An explicit ``--config`` file wins; otherwise discover one."""
    if config_path:
        explicit = Path(config_path)
        return explicit if explicit.is_file() else None
    return find_config(start)


def read_sections(path: Path) -> dict[str, Any]:
    """Parse *path* and validate it against the section models.

    Only keys the file actually sets are returned, so code defaults stay
    below environment overrides. Bad TOML is reported as a
    :class:`click.ClickException`; bad values raise pydantic's
    ``ValidationError``.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
    return PomoConfig.model_validate(data).model_dump(exclude_unset=True)
