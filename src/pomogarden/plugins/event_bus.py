"""Synchronous event dispatch via pluggy.

Every hook implementation is called on the caller's thread, one at a
time, so a failing plugin never stops its siblings from seeing the event.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pomogarden.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Hook dispatch with per-plugin failure isolation.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
    """

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager
        self._skipped_wrappers: set[tuple[str, str]] = set()

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> list[str]:
        """Call every implementation of *hook_name* with *payload*.

        Returns one warning per implementation that raised.
        """
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook named %s; event dropped", hook_name)
            return []

        failures: list[str] = []
        # pluggy calls the most recently registered implementation first
        for impl in reversed(hook_fn.get_hookimpls()):
            if impl.wrapper or impl.hookwrapper:
                self._skip_wrapper(impl.plugin_name, hook_name)
                continue
            try:
                impl.function(*(payload[name] for name in impl.argnames))
            except Exception:
                logger.warning(
                    "Plugin %s failed on %s", impl.plugin_name, hook_name, exc_info=True
                )
                failures.append(f"Plugin {impl.plugin_name} failed on {hook_name}")
        return failures

    def ask(self, hook_name: str, payload: dict[str, Any]) -> Any | None:
        """Call a ``firstresult`` hook and return its answer (None if none).

        A plugin that raises while answering counts as no answer.
        """
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return None
        try:
            return hook_fn(**payload)
        except Exception:
            logger.warning("Plugin failed answering %s", hook_name, exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _skip_wrapper(self, plugin_name: str, hook_name: str) -> None:
        key = (plugin_name, hook_name)
        if key in self._skipped_wrappers:
            return
        self._skipped_wrappers.add(key)
        logger.warning(
            "Plugin %s wraps %s; wrapper implementations are not dispatched",
            plugin_name,
            hook_name,
        )
