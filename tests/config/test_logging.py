"""Tests for the structlog-backed logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from pomogarden.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved = (root.handlers[:], root.level, logging.getLogger("pomogarden").level)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    logging.getLogger("pomogarden").setLevel(saved[2])


def _json_lines(err: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestLevels:
    def test_verbose_is_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("pomogarden").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger("pomogarden").level == logging.WARNING

    @pytest.mark.parametrize("library", ["sqlalchemy", "pluggy"])
    def test_libraries_stay_quiet(self, library: str) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(library).level == logging.WARNING

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestOutput:
    def test_json_record_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("pomogarden.services.timer").debug("Timer started: %s", "focus")

        captured = capfd.readouterr()
        assert captured.out == ""
        (record,) = _json_lines(captured.err)
        assert record["event"] == "Timer started: focus"
        assert record["level"] == "debug"
        assert record["logger"] == "pomogarden.services.timer"
        assert "timestamp" in record

    def test_json_keeps_glyphs(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        logging.getLogger("pomogarden.services.garden").warning("Lost %s", "🌻")
        (record,) = _json_lines(capfd.readouterr().err)
        assert record["event"] == "Lost 🌻"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)

        logging.getLogger("pomogarden.domain.placement").debug("probe noise")
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")

        assert capfd.readouterr().err == ""

    def test_console_renderer(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        logging.getLogger("pomogarden.infrastructure.store").warning("Could not save 'garden'")
        err = capfd.readouterr().err
        assert "Could not save 'garden'" in err
        assert "warning" in err
