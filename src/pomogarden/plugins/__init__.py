"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins in ``.pomogarden/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from pomogarden.plugins.event_bus import EventBus
from pomogarden.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("pomogarden")

__all__ = ["EventBus", "PluginManager", "hookimpl"]
