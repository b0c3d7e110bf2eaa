"""Dispatcher — the deploy, invoke and query protocols.

The dispatcher resolves a function name through a sealed
:class:`~iotcp.services.registry.RouteRegistry`, runs the handler against
the caller's ledger stub, and turns the outcome into a
:class:`~iotcp.services.result.ServiceResult`.

Reporting rules:

- **deploy / invoke**: every call, whatever its outcome, publishes exactly
  one result event (:func:`iotcp.services.events.report`). Errors are
  reported on both channels with the same message.
- **query**: never publishes an event. A successful result is parsed into
  an :class:`~iotcp.domain.assets.AssetResponse`, redacted for the caller
  named in the request payload, and returned. The route listing is
  platform metadata and is returned as-is.

No call is retried here; retry policy belongs to the hosting runtime.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from iotcp.domain.assets import AssetResponse, QueryRequest
from iotcp.domain.policy import filter_response
from iotcp.domain.types import Method
from iotcp.services.errors import ErrorCode
from iotcp.services.events import report
from iotcp.services.registry import ReadAllRoutes
from iotcp.services.result import ServiceError, ServiceResult
from iotcp.services.telemetry import traced

if TYPE_CHECKING:
    from iotcp.domain.ledger import LedgerStub
    from iotcp.services.registry import RouteRegistry

logger = logging.getLogger(__name__)

# Index of the query request payload in ``stub.get_string_args()``;
# index 0 is the function name.
REQUEST_ARG_INDEX = 1


class Dispatcher:
    """Routes deploy, invoke and query calls to registered handlers.

    Constructing a dispatcher seals *registry*; no routes can be added once
    traffic can reach it.
    """

    def __init__(self, registry: RouteRegistry) -> None:
        registry.seal()
        self._registry = registry

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Deploy
    # ------------------------------------------------------------------

    @traced
    def deploy(self, stub: LedgerStub, args: list[str], version: str) -> ServiceResult:
        """Run every deploy handler with ``[args[0], version]``.

        The first failing handler aborts the rest.
        """
        op = Method.DEPLOY.value
        warnings: list[str] = []

        if not args:
            msg = "deploy received no args, expecting a JSON object in args[0]"
            return self._fail_reported(stub, op, ErrorCode.MISSING_ARGUMENT, msg, warnings)

        handlers = self._registry.deploy_handlers()
        if not handlers:
            msg = "deploy found no registered deploy functions"
            return self._fail_reported(stub, op, ErrorCode.NO_DEPLOY_HANDLERS, msg, warnings)

        init_args = [args[0], version]
        for handler in handlers:
            try:
                handler.execute(stub, init_args)
            except Exception as exc:
                return self._fail_reported(
                    stub,
                    op,
                    ErrorCode.DEPLOY_HANDLER_FAILED,
                    str(exc),
                    warnings,
                    handler=type(handler).__name__,
                    cause=exc,
                )

        report(stub, warnings=warnings)
        logger.debug("Deploy complete at version %s (%d handlers)", version, len(handlers))
        return ServiceResult(
            ok=True,
            op=op,
            data={"version": version, "handlers": len(handlers)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Invoke
    # ------------------------------------------------------------------

    @traced
    def invoke(self, stub: LedgerStub, function: str, args: list[str]) -> ServiceResult:
        """Run an invoke handler and report its outcome as a result event.

        A handler may return a JSON object; its keys are merged into the
        success event. Anything else non-empty is a contract violation.
        """
        op = Method.INVOKE.value
        warnings: list[str] = []

        route = self._registry.lookup(function)
        if route is None:
            msg = f"invoke did not find registered function {function!r}"
            return self._fail_reported(
                stub, op, ErrorCode.ROUTE_NOT_FOUND, msg, warnings, function=function
            )

        try:
            returned = route.handler.execute(stub, args)
        except Exception as exc:
            return self._fail_reported(
                stub,
                op,
                ErrorCode.INVOKE_HANDLER_FAILED,
                str(exc),
                warnings,
                function=function,
                cause=exc,
            )

        info: dict[str, Any] | None = None
        if returned:
            try:
                info = _parse_event_map(returned)
            except (ValueError, TypeError, RecursionError) as exc:
                msg = (
                    f"invoke ({function}) returned an event that is not a JSON object: {exc}"
                )
                return self._fail_reported(
                    stub,
                    op,
                    ErrorCode.INVOKE_RESULT_MALFORMED,
                    msg,
                    warnings,
                    function=function,
                    cause=exc,
                )

        event = report(stub, info=info, warnings=warnings)
        logger.debug("Invoke %s complete", function)
        return ServiceResult(
            ok=True,
            op=op,
            data={"function": function, "event": event.payload},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    @traced
    def query(self, stub: LedgerStub, function: str, args: list[str]) -> ServiceResult:
        """Run a query handler and return its result redacted for the caller."""
        op = Method.QUERY.value
        caller = self._read_caller(stub)

        route = self._registry.lookup(function)
        if route is None:
            msg = f"query did not find registered function {function!r}"
            return self._fail(op, ErrorCode.ROUTE_NOT_FOUND, msg, function=function)

        try:
            returned = route.handler.execute(stub, args)
        except Exception as exc:
            return self._fail(
                op, ErrorCode.QUERY_HANDLER_FAILED, str(exc), function=function, cause=exc
            )

        if isinstance(route.handler, ReadAllRoutes):
            response: Any = json.loads(returned) if returned else None
        else:
            parsed = _parse_asset_response(function, returned)
            response = filter_response(parsed, caller).model_dump(mode="json", by_alias=True)

        logger.debug("Query %s complete for caller %r", function, caller)
        return ServiceResult(ok=True, op=op, data={"function": function, "response": response})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _read_caller(stub: LedgerStub) -> str:
        """Read the caller identity from the out-of-band request payload.

        A missing or unreadable payload yields ``""``, which selects the
        least-disclosure policy.
        """
        raw = stub.get_string_args()
        if len(raw) <= REQUEST_ARG_INDEX:
            logger.warning("Query request payload missing, applying default redaction")
            return ""
        try:
            request = QueryRequest.model_validate_json(raw[REQUEST_ARG_INDEX])
        except ValidationError as exc:
            logger.warning("Query request payload unreadable, applying default redaction: %s", exc)
            return ""
        return request.caller

    def _fail(
        self,
        op: str,
        code: ErrorCode,
        message: str,
        *,
        cause: Exception | None = None,
        **detail: Any,
    ) -> ServiceResult:
        logger.error("%s failed [%s]: %s %s", op, code, message, detail, exc_info=cause)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=str(code), message=message, detail=detail),
        )

    def _fail_reported(
        self,
        stub: LedgerStub,
        op: str,
        code: ErrorCode,
        message: str,
        warnings: list[str],
        *,
        cause: Exception | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Fail a deploy/invoke call and publish the matching error event."""
        result = self._fail(op, code, message, cause=cause, **detail)
        report(stub, error=message, warnings=warnings)
        if warnings:
            result = result.model_copy(update={"warnings": warnings})
        return result


def _parse_event_map(raw: bytes | str) -> dict[str, Any]:
    """Decode handler output as a JSON object. Raises ValueError otherwise."""
    if not isinstance(raw, (bytes, str)):
        msg = f"expected JSON bytes, got {type(raw).__name__}"
        raise TypeError(msg)
    value = json.loads(raw)
    if not isinstance(value, dict):
        msg = f"expected a JSON object, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def _parse_asset_response(function: str, raw: bytes | None) -> AssetResponse:
    """Parse handler output, degrading to an empty response on failure."""
    if not raw:
        return AssetResponse()
    try:
        return AssetResponse.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("Query %s returned an unreadable response: %s", function, exc)
        return AssetResponse()
