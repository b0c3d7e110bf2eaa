"""Serializable record types for asset classes and query payloads.

JSON keys follow the wire format used by the contract's clients
(``assetID``, ``truckPdate``, ``v5cID`` ...). Python attribute names are
snake_case; models accept either form on input and always serialize by
alias.

All models ignore unknown keys and default every leaf to an empty string,
so a partial document parses into a complete, consistent shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_WIRE = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AssetClass(BaseModel):
    """An asset class that owns routes and stored records."""

    model_config = _WIRE

    name: str
    prefix: str = ""
    asset_id_path: str = Field(default="", alias="assetIDpath")


SYSTEM_CLASS = AssetClass(name="system", prefix="SYS.", asset_id_path="")


class DocumentCert(BaseModel):
    """Certificate / document attachment embedded in a shipment record."""

    model_config = _WIRE

    cert: str = ""


class AssetRecord(BaseModel):
    """A supply-chain shipment record.

    ``asset_id`` (``assetID``) is the ledger key and is never redacted.
    """

    model_config = _WIRE

    transaction_type: str = Field(default="", alias="transactionType")
    owner_id: str = Field(default="", alias="ownerId")
    asset_id: str = Field(default="", alias="assetID")
    matnr_af: str = Field(default="", alias="matnrAf")
    po_dma: str = Field(default="", alias="poDma")
    po_supp: str = Field(default="", alias="poSupp")
    dma_del_date: str = Field(default="", alias="dmaDelDate")
    af_del_date: str = Field(default="", alias="afDelDate")
    truck_mod: str = Field(default="", alias="truckMod")
    truck_pdate: str = Field(default="", alias="truckPdate")
    truck_chnum: str = Field(default="", alias="truckChnum")
    truck_ennum: str = Field(default="", alias="truckEnnum")
    supp_test: str = Field(default="", alias="suppTest")
    gr_dma: str = Field(default="", alias="grDma")
    gr_af: str = Field(default="", alias="grAf")
    dma_masdat: str = Field(default="", alias="dmaMasdat")
    af_dma_test: str = Field(default="", alias="afDmaTest")
    dma_cert: DocumentCert = Field(default_factory=DocumentCert, alias="dmaCert")
    af_doc: str = Field(default="", alias="afDoc")
    caller: str = ""
    v5c_id: str = Field(default="", alias="v5cID")


class QueryRequest(BaseModel):
    """Out-of-band request payload carrying the caller identity."""

    model_config = _WIRE

    asset: AssetRecord = Field(default_factory=AssetRecord)

    @property
    def caller(self) -> str:
        return self.asset.caller


class AssetState(BaseModel):
    model_config = _WIRE

    asset: list[AssetRecord] = Field(default_factory=list)


class EventAssetRef(BaseModel):
    model_config = _WIRE

    asset_id: str = Field(default="", alias="assetID")


class EventPayload(BaseModel):
    """Metadata about the transaction that last touched the asset."""

    model_config = _WIRE

    asset: EventAssetRef = Field(default_factory=EventAssetRef)
    event_function: str = Field(default="", alias="eventfunction")
    txn_id: str = Field(default="", alias="txnid")
    txn_ts: str = Field(default="", alias="txnts")


class EventOut(BaseModel):
    model_config = _WIRE

    name: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
    compliant: str = ""


class AssetResponse(BaseModel):
    """Structured query response for an asset read.

    This is the document the response filter operates on before it is
    returned to the caller.
    """

    model_config = _WIRE

    assetclass: AssetClass = Field(default_factory=lambda: AssetClass(name=""))
    assetkey: str = ""
    assetstate: AssetState = Field(default_factory=AssetState)
    eventpayload: EventPayload = Field(default_factory=EventPayload)
    eventout: EventOut = Field(default_factory=EventOut)

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")
