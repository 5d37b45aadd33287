"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints
in the ``metamint.plugins`` group, plus direct registration.
"""

from __future__ import annotations

import logging

import pluggy

from metamint.plugins.hookspecs import PROJECT_NAME, MetamintHookSpec

ENTRYPOINT_GROUP = "metamint.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MetamintHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``metamint.plugins`` entry-point group.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRYPOINT_GROUP)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]
