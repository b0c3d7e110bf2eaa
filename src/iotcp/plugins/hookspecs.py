"""Pluggy hook specifications for asset-class plugins.

Asset classes contribute routes once, during start-up, before the
registry is sealed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from iotcp.services.registry import RouteRegistry

hookspec = pluggy.HookspecMarker("iotcp")
hookimpl = pluggy.HookimplMarker("iotcp")


class IotcpHookSpec:
    """Hook specifications for the iotcp plugin system."""

    @hookspec
    def register_routes(self, registry: RouteRegistry) -> None:
        """Register this plugin's routes on *registry*.

        Raising (for example a duplicate function name) aborts start-up.
        """
