"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints
for the ``formkit.plugins`` group, plus direct per-form registration.
Capabilities: submission lifecycle hooks, extra input modules.

INVARIANT: A broken plugin module registration is a warning, never an error.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from formkit.plugins.hookspecs import FormHookSpec

PROJECT_NAME = "formkit"
ENTRY_POINT_GROUP = "formkit.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch for one form."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FormHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``formkit.plugins`` entry point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance.

        Raises:
            ValueError: If *plugin* is not registered.
        """
        if not self._pm.is_registered(plugin):
            msg = f"Plugin {plugin!r} is not registered"
            raise ValueError(msg)
        self._pm.unregister(plugin)
        logger.debug("Unregistered plugin: %s", plugin.__class__.__name__)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins, in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    def collect_input_modules(self) -> dict[str, Any]:
        """Merge the ``register_input_modules`` results of every plugin.

        Plugins are visited in registration order; on conflicting type names
        the last registered plugin wins.
        """
        modules: dict[str, Any] = {}
        for plugin_name, plugin in self._pm.list_name_plugin():
            hook = getattr(plugin, "register_input_modules", None)
            if hook is None:
                continue

            try:
                module_map = hook()
            except Exception:
                logger.warning(
                    "Failed to collect input modules from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            if module_map is None:
                continue
            if not isinstance(module_map, dict):
                logger.warning(
                    "Plugin %s returned non-dict input module registrations",
                    plugin_name,
                )
                continue
            modules.update(module_map)
        return modules

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("formkit")`` sets a ``formkit_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "formkit_impl", None):
                return True
        return False
