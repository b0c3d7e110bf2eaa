"""Role-based response filtering for asset query results.

The policy is a static table mapping each known :class:`CallerRole` to the
set of :class:`AssetRecord` fields that must be cleared before the record
is returned. Fields outside a role's set pass through unchanged.

Rules:

- ``asset_id`` is the ledger key and appears in no redaction set.
- ``dma_cert`` is cleared for every role, including ``DMA``.
  Certificate data is never returned through the query path.
- Any caller outside the known roles gets :data:`DEFAULT_REDACTION`, the
  superset of every named role's set plus the identifying fields.

Redaction is evaluated once per response and is idempotent: filtering an
already-filtered record for the same role returns an equal record.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from iotcp.domain.assets import AssetRecord, AssetResponse, AssetState, DocumentCert
from iotcp.domain.types import CallerRole

if TYPE_CHECKING:
    from collections.abc import Mapping

CERT_FIELD = "dma_cert"

_AF = frozenset(
    {
        "matnr_af",
        "po_supp",
        "dma_del_date",
        "supp_test",
        "gr_dma",
        CERT_FIELD,
    }
)

_DMA = frozenset({CERT_FIELD})

_SUPPLIER = frozenset(
    {
        "matnr_af",
        "po_dma",
        "af_del_date",
        "gr_dma",
        "gr_af",
        "dma_masdat",
        "af_dma_test",
        "af_doc",
        CERT_FIELD,
    }
)

_TRANSPORTER = frozenset(
    {
        "matnr_af",
        "po_dma",
        "po_supp",
        "dma_del_date",
        "af_del_date",
        "truck_mod",
        "truck_pdate",
        "truck_chnum",
        "truck_ennum",
        "supp_test",
        "gr_dma",
        "gr_af",
        "dma_masdat",
        "af_dma_test",
        "af_doc",
        CERT_FIELD,
    }
)

DEFAULT_REDACTION: frozenset[str] = (
    _AF
    | _DMA
    | _SUPPLIER
    | _TRANSPORTER
    | {"transaction_type", "owner_id", "caller", "v5c_id"}
)

REDACTION_POLICY: Mapping[CallerRole, frozenset[str]] = MappingProxyType(
    {
        CallerRole.AF: _AF,
        CallerRole.DMA: _DMA,
        CallerRole.SUPPLIER: _SUPPLIER,
        CallerRole.TRANSPORTER: _TRANSPORTER,
    }
)


def redacted_fields(caller: str) -> frozenset[str]:
    """Return the field names cleared for *caller*.

    Role matching is exact and case-sensitive; anything else falls back to
    :data:`DEFAULT_REDACTION`.
    """
    try:
        role = CallerRole(caller)
    except ValueError:
        return DEFAULT_REDACTION
    return REDACTION_POLICY[role]


def redact_record(record: AssetRecord, caller: str) -> AssetRecord:
    """Return a copy of *record* with the fields hidden from *caller* emptied."""
    update: dict[str, object] = {}
    for name in redacted_fields(caller):
        if name == CERT_FIELD:
            update[name] = DocumentCert()
        else:
            update[name] = ""
    return record.model_copy(update=update)


def filter_response(response: AssetResponse, caller: str) -> AssetResponse:
    """Redact every asset record in *response* for *caller*."""
    assets = [redact_record(record, caller) for record in response.assetstate.asset]
    return response.model_copy(update={"assetstate": AssetState(asset=assets)})
