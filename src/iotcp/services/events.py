"""Result event emission for deploy and invoke calls.

Every deploy or invoke call ends with exactly one :data:`RESULT_EVENT_NAME`
event on the ledger. The payload is a JSON object whose ``status`` is
``"OK"`` or ``"ERROR"``. Failures add ``message`` and nothing else; any
success context gathered before the failure is dropped so subscribers
never see a half-built success report.

INVARIANT: publication failures are warnings, never errors. By the time an
event is reported the outcome of the call is already decided.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from iotcp.domain.ledger import LedgerStub

logger = logging.getLogger(__name__)

RESULT_EVENT_NAME = "EVT.IOTCP.INVOKE.RESULT"

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"


class ResultEvent(BaseModel):
    """One terminal notification, built fresh per call and published once."""

    model_config = {"frozen": True}

    name: str = RESULT_EVENT_NAME
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def build(cls, error: str | None = None, info: dict[str, Any] | None = None) -> ResultEvent:
        if error is not None:
            return cls(payload={"status": STATUS_ERROR, "message": error})
        return cls(payload={**(info or {}), "status": STATUS_OK})

    @property
    def ok(self) -> bool:
        return self.payload.get("status") == STATUS_OK

    def to_bytes(self) -> bytes:
        return json.dumps(self.payload).encode("utf-8")


def report(
    stub: LedgerStub,
    error: str | None = None,
    info: dict[str, Any] | None = None,
    *,
    warnings: list[str] | None = None,
) -> ResultEvent:
    """Build the result event and publish it through *stub*.

    Returns the event whether or not publication succeeded. When
    publication fails the failure is logged and, if *warnings* is given,
    appended to it.
    """
    event = ResultEvent.build(error, info)
    logger.debug("Reporting result event %s with payload %s", event.name, event.payload)
    try:
        stub.set_event(event.name, event.to_bytes())
    except Exception:
        logger.warning("Result event publication failed for %s", event.name, exc_info=True)
        if warnings is not None:
            warnings.append(f"Result event {event.name} could not be published")
    return event
