"""PreferencesService — the theme flag and the interface language.

Both are single persisted blobs. Unknown or unreadable values load as
the defaults (``light`` and ``es``) and are never surfaced as errors;
only explicit attempts to *set* an unknown value are rejected.
"""

from __future__ import annotations

import logging

from pomogarden.domain.locale import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, is_supported
from pomogarden.domain.types import Theme
from pomogarden.infrastructure.store import LANGUAGE_KEY, THEME_KEY
from pomogarden.services.base import BaseService
from pomogarden.services.result import ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_THEME = Theme.LIGHT


class PreferencesService(BaseService):
    """Read and change display preferences."""

    def theme(self) -> Theme:
        raw = self._workspace.store.load(THEME_KEY)
        try:
            return Theme(raw) if raw is not None else DEFAULT_THEME
        except ValueError:
            logger.warning("Unknown stored theme %r; using %s", raw, DEFAULT_THEME)
            return DEFAULT_THEME

    def language(self) -> str:
        raw = self._workspace.store.load(LANGUAGE_KEY)
        if isinstance(raw, str) and is_supported(raw):
            return raw
        return DEFAULT_LANGUAGE

    def get_theme(self) -> ServiceResult:
        return ServiceResult(ok=True, op="theme", data={"theme": self.theme().value})

    def set_theme(self, value: str) -> ServiceResult:
        """Persist *value* (``light`` or ``dark``)."""
        op = "set_theme"
        try:
            theme = Theme(value)
        except ValueError:
            logger.error("Unknown theme: %r", value)
            return ServiceResult.rejected(
                op,
                "UNKNOWN_THEME",
                f"Unknown theme: {value!r} (expected light or dark)",
            )
        return self._store_theme(op, theme)

    def toggle_theme(self) -> ServiceResult:
        """Flip between light and dark."""
        current = self.theme()
        return self._store_theme(
            "toggle_theme", Theme.DARK if current is Theme.LIGHT else Theme.LIGHT
        )

    def get_language(self) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op="language",
            data={"language": self.language(), "supported": list(SUPPORTED_LANGUAGES)},
        )

    def set_language(self, value: str) -> ServiceResult:
        """Persist *value* and switch the workspace translator to it."""
        op = "set_language"
        if not is_supported(value):
            logger.error("Unsupported language: %r", value)
            return ServiceResult.rejected(
                op,
                "UNSUPPORTED_LANGUAGE",
                f"Unsupported language: {value!r} "
                f"(expected one of {', '.join(SUPPORTED_LANGUAGES)})",
                language=value,
            )
        warnings: list[str] = []
        if not self._workspace.store.save(LANGUAGE_KEY, value):
            warnings.append("Language could not be saved; it applies to this run only")
        self._workspace.use_language(value)
        return ServiceResult(ok=True, op=op, data={"language": value}, warnings=warnings)

    def _store_theme(self, op: str, theme: Theme) -> ServiceResult:
        warnings: list[str] = []
        if not self._workspace.store.save(THEME_KEY, theme.value):
            warnings.append("Theme could not be saved; it applies to this run only")
        return ServiceResult(ok=True, op=op, data={"theme": theme.value}, warnings=warnings)
