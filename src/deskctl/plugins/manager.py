"""Plugin discovery and hook dispatch for deskctl.

Plugins come from three places, loaded in this order:

1. ``deskctl.plugins`` entry points of installed distributions;
2. single-file plugins in ``.deskctl/plugins/*.py`` of the workspace;
3. built-ins registered by the workspace (the category tagger).

Names listed in ``[plugins] blocked`` are blocked before loading, so a
blocked plugin never registers, whichever source offers it.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import ModuleType

import pluggy

from deskctl.plugins.hookspecs import DeskctlHookSpec

PROJECT_NAME = "deskctl"
ENTRY_POINT_GROUP = "deskctl.plugins"
LOCAL_MODULE_PREFIX = "deskctl_local_plugin_"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with deskctl discovery."""

    def __init__(self, *, blocked: Iterable[str] = ()) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(DeskctlHookSpec)
        for name in blocked:
            self._pm.set_blocked(name)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local ones; return registered names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local(py_file)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or plugin.__class__.__name__
        if self._pm.is_blocked(name):
            logger.debug("Plugin %s is blocked", name)
            return
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Local plugins
    # ------------------------------------------------------------------

    def _load_local(self, py_file: Path) -> None:
        """Import one local plugin file and register its hook classes.

        A file that fails to import or instantiate is logged and skipped.
        """
        module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
        try:
            module = _import_file(module_name, py_file)
        except Exception:
            logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
            sys.modules.pop(module_name, None)
            return

        for cls in _hook_classes(module):
            try:
                self.register_plugin(cls(), name=f"{module_name}.{cls.__name__}")
            except Exception:
                logger.warning(
                    "Failed to instantiate %s from %s", cls.__name__, py_file, exc_info=True
                )

    def _instantiate_class_plugins(self) -> None:
        """Entry points may register a class; swap it for an instance so hooks bind ``self``."""
        for plugin in list(self._pm.get_plugins()):
            if not (inspect.isclass(plugin) and self._has_hook_impls(plugin)):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """True when any public attribute carries the ``deskctl_impl`` marker."""
        marker = f"{PROJECT_NAME}_impl"
        for name in dir(cls):
            if name.startswith("_"):
                continue
            attr = getattr(cls, name, None)
            if callable(attr) and getattr(attr, marker, None):
                return True
        return False


def _import_file(module_name: str, path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot create a module spec for {path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* (not imported into it) that implement hooks."""
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ == module.__name__ and PluginManager._has_hook_impls(obj):
            yield obj
