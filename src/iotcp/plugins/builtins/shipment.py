"""Built-in shipment asset class.

Registers the supply-chain shipment routes: contract initialization on
deploy, create/update/delete on invoke, and a single-asset read on query.
Request arguments are JSON documents of the form ``{"asset": {...}}``
using the wire keys of :class:`~iotcp.domain.assets.AssetRecord`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from iotcp.domain.assets import (
    AssetClass,
    AssetRecord,
    AssetResponse,
    AssetState,
    EventAssetRef,
    EventPayload,
    QueryRequest,
)
from iotcp.domain.types import Method
from iotcp.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from iotcp.domain.ledger import LedgerStub
    from iotcp.services.registry import RouteRegistry

logger = logging.getLogger(__name__)

SHIPMENT_CLASS = AssetClass(name="shipment", prefix="SHP.", asset_id_path="asset.assetID")
CONTRACT_STATE_KEY = "IOTCP.CONTRACTSTATE.shipment"


def asset_key(asset_id: str) -> str:
    return f"{SHIPMENT_CLASS.prefix}{asset_id}"


def _parse_request(args: list[str], function: str) -> AssetRecord:
    if not args:
        msg = f"{function} expects a JSON request in args[0]"
        raise ValueError(msg)
    try:
        record = QueryRequest.model_validate_json(args[0]).asset
    except ValidationError as exc:
        msg = f"{function} could not parse request: {exc.error_count()} validation error(s)"
        raise ValueError(msg) from exc
    if not record.asset_id:
        msg = f"{function} request has no assetID"
        raise ValueError(msg)
    return record


def _load(stub: LedgerStub, asset_id: str) -> AssetRecord:
    raw = stub.get_state(asset_key(asset_id))
    if raw is None:
        msg = f"shipment {asset_id} does not exist"
        raise LookupError(msg)
    return AssetRecord.model_validate_json(raw)


def _store(stub: LedgerStub, record: AssetRecord) -> None:
    stub.put_state(asset_key(record.asset_id), record.model_dump_json(by_alias=True).encode())


def _event(asset_id: str, function: str) -> bytes:
    return json.dumps({"assetID": asset_id, "eventfunction": function}).encode()


class InitShipments:
    """Deploy: record the contract version and initialization payload."""

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        payload, version = args[0], args[1]
        try:
            init: Any = json.loads(payload)
        except ValueError as exc:
            msg = f"initShipments payload is not valid JSON: {exc}"
            raise ValueError(msg) from exc
        if not isinstance(init, dict):
            msg = "initShipments payload must be a JSON object"
            raise ValueError(msg)
        state = {"version": version, "init": init}
        stub.put_state(CONTRACT_STATE_KEY, json.dumps(state).encode())
        logger.debug("Shipment contract initialized at version %s", version)
        return None


class CreateAsset:
    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        record = _parse_request(args, "createAsset")
        if stub.get_state(asset_key(record.asset_id)) is not None:
            msg = f"shipment {record.asset_id} already exists"
            raise ValueError(msg)
        _store(stub, record)
        return _event(record.asset_id, "createAsset")


class UpdateAsset:
    """Invoke: overlay the request's non-empty fields onto the stored record."""

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        incoming = _parse_request(args, "updateAsset")
        existing = _load(stub, incoming.asset_id)
        changes = incoming.model_dump(exclude_defaults=True, exclude={"asset_id"})
        merged = AssetRecord.model_validate({**existing.model_dump(), **changes})
        _store(stub, merged)
        return _event(merged.asset_id, "updateAsset")


class DeleteAsset:
    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        record = _parse_request(args, "deleteAsset")
        _load(stub, record.asset_id)
        stub.del_state(asset_key(record.asset_id))
        return _event(record.asset_id, "deleteAsset")


class ReadAsset:
    """Query: return the stored record wrapped in an asset response."""

    def execute(self, stub: LedgerStub, args: list[str]) -> bytes | None:
        request = _parse_request(args, "readAsset")
        record = _load(stub, request.asset_id)
        response = AssetResponse(
            assetclass=SHIPMENT_CLASS,
            assetkey=asset_key(record.asset_id),
            assetstate=AssetState(asset=[record]),
            eventpayload=EventPayload(
                asset=EventAssetRef(asset_id=record.asset_id),
                event_function="readAsset",
            ),
        )
        return response.to_json()


class ShipmentPlugin:
    """Registers the shipment asset class routes."""

    @hookimpl
    def register_routes(self, registry: RouteRegistry) -> None:
        registry.register("initShipments", Method.DEPLOY, SHIPMENT_CLASS, InitShipments())
        registry.register("createAsset", Method.INVOKE, SHIPMENT_CLASS, CreateAsset())
        registry.register("updateAsset", Method.INVOKE, SHIPMENT_CLASS, UpdateAsset())
        registry.register("deleteAsset", Method.INVOKE, SHIPMENT_CLASS, DeleteAsset())
        registry.register("readAsset", Method.QUERY, SHIPMENT_CLASS, ReadAsset())
