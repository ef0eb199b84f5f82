"""Plugin discovery and registration.

Two sources feed the pluggy manager:

* installed distributions advertising the ``pomogarden.plugins`` entry
  point group;
* single-file plugins dropped into ``.pomogarden/plugins/`` under the
  data root, registered as ``local:<file stem>:<class name>``.

A plugin that fails to import or construct is logged and skipped.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType

import pluggy

from pomogarden.plugins.hookspecs import PomogardenHookSpec

PROJECT_NAME = "pomogarden"
ENTRY_POINT_GROUP = "pomogarden.plugins"
LOCAL_MODULE_PREFIX = "_pomogarden_plugin_"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin owner of a ``pluggy.PluginManager`` for the pomogarden hooks."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PomogardenHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Register entry-point plugins, then any plugins found in *local_dir*.

        Returns the names of every registered plugin afterwards.
        """
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d entry-point plugin(s)", count)
        self._instantiate_class_plugins()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local_file(py_file)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin*; the name defaults to its class name."""
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _declares_hooks(self, cls: type) -> bool:
        """Whether any public attribute of *cls* is marked ``@hookimpl``."""
        return any(
            self._pm.parse_hookimpl_opts(cls, attr) is not None
            for attr in dir(cls)
            if not attr.startswith("_")
        )

    def _instantiate_class_plugins(self) -> None:
        # Entry points may name a class rather than an instance; hooks on a
        # bare class would be called without ``self``.
        for plugin in self.get_plugins():
            if not inspect.isclass(plugin) or not self._declares_hooks(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)

    def _load_local_file(self, py_file: Path) -> None:
        module = _import_file(py_file)
        if module is None:
            return
        for _attr, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module.__name__ or not self._declares_hooks(cls):
                continue
            name = f"local:{py_file.stem}:{cls.__name__}"
            try:
                self.register_plugin(cls(), name=name)
            except Exception:
                logger.warning("Failed to register local plugin %s", name, exc_info=True)


def _import_file(py_file: Path) -> ModuleType | None:
    """Import *py_file* as a standalone module, or None if it fails."""
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        sys.modules.pop(module_name, None)
        return None
    return module
