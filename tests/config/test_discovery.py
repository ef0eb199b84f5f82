"""Tests for config discovery and loading."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from pomogarden.config.discovery import (
    CONFIG_FILENAME,
    find_config,
    read_sections,
    resolve_config,
)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[ui]\nbell = false\n")
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        monkeypatch.setenv("POMOGARDEN_CONFIG", str(config_file))
        assert find_config(tmp_path / "nowhere") == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("POMOGARDEN_CONFIG", str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestResolveConfig:
    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        explicit = tmp_path / "other.toml"
        explicit.write_text("")
        assert resolve_config(str(explicit), tmp_path) == explicit

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert resolve_config(str(tmp_path / "gone.toml"), tmp_path) is None

    def test_falls_back_to_walk_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert resolve_config(None, tmp_path) == tmp_path / CONFIG_FILENAME


class TestReadSections:
    def test_only_set_keys_returned(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[garden]\nsky_height = 480\n")
        assert read_sections(path) == {"garden": {"sky_height": 480}}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")
        assert read_sections(path) == {}

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[weather]\nsunny = true\n[ui]\nbell = false\n")
        assert read_sections(path) == {"ui": {"bell": False}}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[garden\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            read_sections(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[garden]\ncell_width = 0\n")
        with pytest.raises(ValidationError):
            read_sections(path)
