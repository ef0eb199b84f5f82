"""Workspace — the single dependency injected into every service.

The workspace owns the key-value store, the clock and its cooperative
scheduler, the random source used for placement, the active translator,
and the plugin event bus. Services receive it via their
:class:`BaseService` constructor.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pomogarden.domain.locale import DEFAULT_LANGUAGE, Translator, is_supported
from pomogarden.infrastructure.clock import Clock, SystemClock
from pomogarden.infrastructure.database.engine import STATE_DIRNAME, init_database
from pomogarden.infrastructure.scheduler import CooperativeScheduler
from pomogarden.infrastructure.store import LANGUAGE_KEY, KeyValueStore, MemoryStore, SqliteStore

if TYPE_CHECKING:
    from pomogarden.config.settings import PomoSettings
    from pomogarden.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class Workspace:
    """Process-lifetime context for one pomogarden session.

    Constructed once at CLI startup from :class:`PomoSettings` and held by
    the click context. ``--ephemeral`` runs and tests use a
    :class:`MemoryStore`; otherwise state lives in SQLite under
    ``{data_root}/.pomogarden/``.
    """

    def __init__(
        self,
        settings: PomoSettings,
        *,
        store: KeyValueStore | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        if store is None:
            store = MemoryStore() if settings.ephemeral else SqliteStore(init_database(self.root))
        self._store = store
        self._clock: Clock = clock or SystemClock()
        self._scheduler = CooperativeScheduler(self._clock)
        self._rng = rng or random.Random()
        self._translator = Translator(self._stored_language())
        self._event_bus: EventBus | None = None
        # Terminal width in characters; None means use the configured layout.
        self.viewport_width: int | None = None

    @property
    def root(self) -> Path:
        """The data root directory (holds ``.pomogarden/``)."""
        return self._settings.data_root

    @property
    def plugins_dir(self) -> Path:
        """Directory scanned for single-file local plugins."""
        return self.root / STATE_DIRNAME / "plugins"

    @property
    def settings(self) -> PomoSettings:
        return self._settings

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def scheduler(self) -> CooperativeScheduler:
        return self._scheduler

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def translator(self) -> Translator:
        """Translator for the currently selected language."""
        return self._translator

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def use_language(self, language: str) -> None:
        """Switch the active translator to *language*."""
        self._translator = Translator(language)

    def init_event_bus(self, *, discover: bool = True) -> EventBus:
        """Initialize the plugin event bus.

        Creates a PluginManager, discovers entry-point and local plugins
        (unless *discover* is False), registers the built-in reward and
        notification plugins, and wires up the EventBus.
        """
        from pomogarden.plugins.builtins.notify import NotifyPlugin
        from pomogarden.plugins.builtins.reward import GardenRewardPlugin
        from pomogarden.plugins.event_bus import EventBus
        from pomogarden.plugins.manager import PluginManager

        pm = PluginManager()
        if discover:
            local_dir = None if self._settings.ephemeral else self.plugins_dir
            names = pm.discover_and_load(local_dir=local_dir)
            logger.debug("Discovered plugins: %s", names)

        pm.register_plugin(GardenRewardPlugin(self), name="garden-reward-builtin")
        pm.register_plugin(NotifyPlugin(self), name="notify-builtin")

        self._event_bus = EventBus(pm)
        return self._event_bus

    def register_plugin(self, plugin: Any, name: str | None = None) -> None:
        """Register an extra plugin (e.g. the terminal presenter) on the bus."""
        bus = self._event_bus or self.init_event_bus()
        bus.plugin_manager.register_plugin(plugin, name=name)

    def close(self) -> None:
        """Cancel scheduled jobs and release the store."""
        for job in self._scheduler.jobs:
            job.cancel()
        self._store.close()

    def _stored_language(self) -> str:
        language = self._store.load(LANGUAGE_KEY)
        if isinstance(language, str) and is_supported(language):
            return language
        if language is not None:
            logger.warning("Unsupported language %r; using %s", language, DEFAULT_LANGUAGE)
        return DEFAULT_LANGUAGE
