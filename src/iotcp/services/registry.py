"""Route registry — function name to handler bindings.

A :class:`RouteRegistry` is built once during process start-up, filled by
the platform's own routes and by every asset-class plugin, then sealed.
After sealing it is read-only, so concurrent dispatch can read it without
locking.

INVARIANT: function names are unique across the registry. A second
registration under the same name raises :class:`DuplicateRouteError` and
leaves the first registration in place.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from iotcp.domain.assets import SYSTEM_CLASS, AssetClass
from iotcp.domain.types import Method
from iotcp.services.contracts import RouteOut, dump_validated
from iotcp.services.errors import DuplicateRouteError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from iotcp.domain.ledger import LedgerStub
    from iotcp.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

READ_ALL_ROUTES = "readAllRoutes"


class Handler(Protocol):
    """A single operation bound to a route.

    Implementations raise to signal failure. The returned bytes are
    interpreted by the dispatcher according to the route's method.
    """

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None: ...


@dataclass(frozen=True)
class FunctionHandler:
    """Adapt a plain ``(stub, args) -> bytes | None`` callable to :class:`Handler`."""

    func: Callable[[LedgerStub, list[str]], bytes | None]

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        return self.func(stub, args)


@dataclass(frozen=True)
class Route:
    """A registered binding from function name to handler."""

    function_name: str
    method: Method
    owner: AssetClass
    handler: Handler


class RouteRegistry:
    """Mapping of function name to :class:`Route`."""

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._sealed = False

    def register(
        self,
        function_name: str,
        method: Method | str,
        owner: AssetClass,
        handler: Handler,
    ) -> Route:
        """Add a route. Raises :class:`DuplicateRouteError` on a name clash."""
        if self._sealed:
            msg = f"route registry is sealed; cannot register {function_name!r}"
            raise RuntimeError(msg)
        resolved = Method(method)

        existing = self._routes.get(function_name)
        if existing is not None:
            err = DuplicateRouteError(
                function_name,
                existing_owner=existing.owner.name,
                existing_method=str(existing.method),
                owner=owner.name,
                method=str(resolved),
            )
            logger.error("Route registration rejected: %s", err)
            raise err

        route = Route(function_name, resolved, owner, handler)
        self._routes[function_name] = route
        logger.debug(
            "Class %s added route with function name %s as method %s",
            owner.name,
            function_name,
            resolved,
        )
        return route

    def lookup(self, function_name: str) -> Route | None:
        return self._routes.get(function_name)

    def deploy_handlers(self) -> list[Handler]:
        """All handlers registered with the ``deploy`` method, in registration order."""
        return [r.handler for r in self._routes.values() if r.method is Method.DEPLOY]

    def routes(self) -> list[Route]:
        return list(self._routes.values())

    def seal(self) -> None:
        """Close registration. Idempotent."""
        if not self._sealed:
            logger.debug("Route registry sealed with %d routes", len(self._routes))
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, function_name: object) -> bool:
        return function_name in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes())


@dataclass(frozen=True)
class ReadAllRoutes:
    """Query handler listing every registered route."""

    registry: RouteRegistry

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        rows = [
            dump_validated(
                RouteOut,
                {
                    "functionname": r.function_name,
                    "method": str(r.method),
                    "class": r.owner.model_dump(by_alias=True),
                },
            )
            for r in sorted(self.registry.routes(), key=lambda r: r.function_name)
        ]
        return json.dumps(rows).encode("utf-8")


def register_system_routes(registry: RouteRegistry) -> None:
    """Register the platform's own routes, owned by :data:`SYSTEM_CLASS`."""
    registry.register(READ_ALL_ROUTES, Method.QUERY, SYSTEM_CLASS, ReadAllRoutes(registry))


def create_registry(plugin_manager: PluginManager | None = None) -> RouteRegistry:
    """Build a registry with system routes plus every plugin's routes.

    The returned registry is not sealed; the dispatcher seals it.
    """
    registry = RouteRegistry()
    register_system_routes(registry)
    if plugin_manager is not None:
        plugin_manager.load_routes(registry)
    return registry
