"""Error codes for routing and dispatch failures."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    DUPLICATE_ROUTE = "DUPLICATE_ROUTE"
    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    NO_DEPLOY_HANDLERS = "NO_DEPLOY_HANDLERS"
    DEPLOY_HANDLER_FAILED = "DEPLOY_HANDLER_FAILED"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    INVOKE_HANDLER_FAILED = "INVOKE_HANDLER_FAILED"
    INVOKE_RESULT_MALFORMED = "INVOKE_RESULT_MALFORMED"
    QUERY_HANDLER_FAILED = "QUERY_HANDLER_FAILED"


class DuplicateRouteError(ValueError):
    """Raised when a function name is registered twice.

    This is a startup configuration error and is never recovered from.
    """

    code = ErrorCode.DUPLICATE_ROUTE

    def __init__(
        self,
        function_name: str,
        *,
        existing_owner: str,
        existing_method: str,
        owner: str,
        method: str,
    ) -> None:
        self.function_name = function_name
        self.existing_owner = existing_owner
        self.existing_method = existing_method
        self.owner = owner
        self.method = method
        msg = (
            f"function name {function_name!r} cannot be registered for class {owner!r} "
            f"as method {method!r}: already registered for class {existing_owner!r} "
            f"as method {existing_method!r}"
        )
        super().__init__(msg)
