"""Invocation methods and caller roles."""

from __future__ import annotations

from enum import StrEnum


class Method(StrEnum):
    """Protocol phase a route is registered for."""

    DEPLOY = "deploy"
    INVOKE = "invoke"
    QUERY = "query"


class CallerRole(StrEnum):
    """Known requester identities.

    Any caller string outside this set is treated as an unknown role and
    receives the least-disclosure redaction.
    """

    AF = "AF"
    DMA = "DMA"
    SUPPLIER = "Supplier"
    TRANSPORTER = "Transporter"
