"""PomoSettings: CLI flags, environment, and ``pomogarden.toml`` in one object.

Sources, highest priority first:

1. keyword arguments (the click flags);
2. ``POMOGARDEN_*`` environment variables, ``__`` for nesting
   (``POMOGARDEN_UI__BELL=false``);
3. the TOML file chosen by :func:`pomogarden.config.discovery.resolve_config`;
4. defaults baked into :mod:`pomogarden.config.models`.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pomogarden.config.discovery import read_sections, resolve_config
from pomogarden.config.models import GardenConfig, TimerConfig, UiConfig

# Config file for the settings object under construction.
_active_toml: ContextVar[Path | None] = ContextVar("pomogarden_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the sections of one TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections = read_sections(toml_path) if toml_path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return dict(self._sections)


class PomoSettings(BaseSettings):
    """Frozen, fully merged settings for one pomogarden invocation.

    Attributes:
        data_root: Parent of ``.pomogarden/``. Defaults to the config
            file's directory, else the home directory.
        config_path: The TOML file that was read, if any.
        ephemeral: Keep all state in memory for this process only.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "POMOGARDEN_",
        "env_nested_delimiter": "__",
    }

    data_root: Path = Field(default_factory=Path.home)
    config_path: Path | None = None

    # Output and interaction flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False
    ephemeral: bool = False

    timer: TimerConfig = Field(default_factory=TimerConfig)
    garden: GardenConfig = Field(default_factory=GardenConfig)
    ui: UiConfig = Field(default_factory=UiConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> PomoSettings:
        """Build settings for a CLI run.

        The config file is looked up from *data_root* (or the cwd). When
        no *data_root* is given, the directory holding the config file
        becomes the data root.
        """
        toml_path = resolve_config(config_path, data_root)
        kwargs: dict[str, Any] = dict(cli_flags)
        root = data_root or (toml_path.parent if toml_path else None)
        if root is not None:
            kwargs["data_root"] = root

        token = _active_toml.set(toml_path)
        try:
            return cls(config_path=toml_path, **kwargs)
        finally:
            _active_toml.reset(token)
