"""Plugin discovery, loading, and route collection.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus the built-in asset classes switched on in ``[plugins]`` config.

Unlike lifecycle hooks elsewhere, route registration is not best-effort:
a plugin that fails to register its routes aborts start-up, because a
partially populated registry would silently change which calls succeed.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from iotcp.plugins.hookspecs import IotcpHookSpec

if TYPE_CHECKING:
    from iotcp.config.models import PluginsConfig
    from iotcp.services.registry import RouteRegistry

PROJECT_NAME = "iotcp"
ENTRY_POINT_GROUP = "iotcp.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and route collection."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(IotcpHookSpec)

    def discover_and_load(self, config: PluginsConfig | None = None) -> list[str]:
        """Load entry-point plugins and the enabled built-ins.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if config is None or config.shipment:
            from iotcp.plugins.builtins.shipment import ShipmentPlugin

            self.register_plugin(ShipmentPlugin(), name="shipment")
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def load_routes(self, registry: RouteRegistry) -> None:
        """Call every plugin's ``register_routes`` hook against *registry*."""
        self._pm.hook.register_routes(registry=registry)
        logger.debug("Plugins registered routes; registry now holds %d", len(registry))

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook calls
        against class objects leave ``self`` unbound and fail at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            self._pm.register(plugin(), name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
