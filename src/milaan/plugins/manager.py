"""PluginManager — a thin wrapper over :class:`pluggy.PluginManager`.

Third-party plugins are found through the ``milaan.plugins`` entry-point
group. The session registers its built-in plugins directly.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from milaan.plugins.hookspecs import MilaanHookSpec

PROJECT_NAME = "milaan"
ENTRY_POINT_GROUP = "milaan.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Loads plugins and dispatches lifecycle hooks to them."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MilaanHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self) -> list[str]:
        """Register entry-point plugins and return every registered plugin's name."""
        found = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in list(self._pm.get_plugins()):
            if inspect.isclass(plugin) and _has_hook_impls(plugin):
                self._replace_with_instance(plugin)
        logger.debug("Entry-point plugins found: %d", found)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def dispatch(self, hook_name: str, **payload: Any) -> list[Any]:
        """Call every implementation of *hook_name* with *payload*.

        Raises whatever an implementation raises; callers decide whether
        that is fatal.
        """
        return getattr(self._pm.hook, hook_name)(**payload)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def _replace_with_instance(self, cls: type) -> None:
        """Swap a plugin registered as a class for an instance of it.

        An instance that cannot be built is dropped with a warning.
        """
        name = self._pm.get_name(cls) or cls.__name__
        self._pm.unregister(cls)
        try:
            instance = cls()
        except Exception:
            logger.warning("Dropping plugin %s: could not instantiate", name, exc_info=True)
            return
        self._pm.register(instance, name=name)


def _has_hook_impls(cls: type) -> bool:
    """True if any public attribute of *cls* is marked with ``@hookimpl``."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(cls, attr, None), marker, None) is not None
        for attr in dir(cls)
        if not attr.startswith("_")
    )
