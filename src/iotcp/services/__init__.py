"""Service layer — route registry, dispatcher and result reporting.

INVARIANT: dispatcher entry points return ServiceResult.
"""

from iotcp.services.dispatcher import Dispatcher
from iotcp.services.registry import FunctionHandler, Handler, Route, RouteRegistry, create_registry
from iotcp.services.result import ServiceError, ServiceResult

__all__ = [
    "Dispatcher",
    "FunctionHandler",
    "Handler",
    "Route",
    "RouteRegistry",
    "ServiceError",
    "ServiceResult",
    "create_registry",
]
