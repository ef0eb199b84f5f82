"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pomogarden.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- pomogarden.toml sections ---


class TimerConfig(BaseModel):
    """[timer] section."""

    model_config = {"frozen": True}

    poll_interval: float = Field(default=0.25, gt=0)


class GardenConfig(BaseModel):
    """[garden] section.

    The terminal is the viewport: ground columns are derived from its
    width in characters, the sky plane from its width in virtual pixels.
    """

    model_config = {"frozen": True}

    default_columns: int = Field(default=4, ge=1)
    cell_width: int = Field(default=10, ge=1)
    char_px: int = Field(default=8, ge=1)
    sky_height: int = Field(default=320, ge=1)
    probe_attempts: int = Field(default=200, ge=0)


class UiConfig(BaseModel):
    """[ui] section."""

    model_config = {"frozen": True}

    bell: bool = True
    notify: bool = True


class PomoConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    timer: TimerConfig = Field(default_factory=TimerConfig)
    garden: GardenConfig = Field(default_factory=GardenConfig)
    ui: UiConfig = Field(default_factory=UiConfig)
