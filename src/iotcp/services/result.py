"""ServiceResult and ServiceError — the return contract of every entry point.

INVARIANT: Dispatcher entry points never raise for handler or routing
failures; they return a ServiceResult with ``ok=False`` and a structured
error. The CLI and any embedding runtime consume this type.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``code`` is one of :class:`iotcp.services.errors.ErrorCode`.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one deploy, invoke or query call.

    Attributes:
        ok: Whether the call succeeded.
        op: Protocol phase (``"deploy"``, ``"invoke"`` or ``"query"``).
        data: Phase-specific payload on success.
        warnings: Non-fatal issues, e.g. an event that failed to publish.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    def serialize(self) -> bytes | None:
        """Return the wire bytes a query caller receives, or None.

        Only successful queries carry a response; deploy and invoke report
        through their result event instead.
        """
        if not self.ok or "response" not in self.data:
            return None
        return json.dumps(self.data["response"], separators=(",", ":")).encode("utf-8")
