"""Tests for role-based response filtering."""

from __future__ import annotations

import pytest

from iotcp.domain.assets import (
    AssetClass,
    AssetRecord,
    AssetResponse,
    AssetState,
    DocumentCert,
)
from iotcp.domain.policy import (
    DEFAULT_REDACTION,
    REDACTION_POLICY,
    filter_response,
    redact_record,
    redacted_fields,
)
from iotcp.domain.types import CallerRole
from tests.conftest import make_record

ALL_FIELDS = frozenset(AssetRecord.model_fields)


def _cleared(before: AssetRecord, after: AssetRecord) -> set[str]:
    return {name for name in ALL_FIELDS if getattr(before, name) != getattr(after, name)}


class TestPolicyTable:
    def test_every_known_role_has_an_entry(self) -> None:
        assert set(REDACTION_POLICY) == set(CallerRole)

    def test_asset_key_never_redacted(self) -> None:
        for fields in REDACTION_POLICY.values():
            assert "asset_id" not in fields
        assert "asset_id" not in DEFAULT_REDACTION

    def test_certificate_always_redacted(self) -> None:
        for fields in REDACTION_POLICY.values():
            assert "dma_cert" in fields
        assert "dma_cert" in DEFAULT_REDACTION

    def test_policy_fields_exist_on_record(self) -> None:
        assert DEFAULT_REDACTION <= ALL_FIELDS

    def test_default_is_superset_of_named_roles(self) -> None:
        for fields in REDACTION_POLICY.values():
            assert fields < DEFAULT_REDACTION

    def test_default_hides_identity_fields(self) -> None:
        assert {"transaction_type", "owner_id", "caller", "v5c_id"} <= DEFAULT_REDACTION


class TestRedactedFields:
    @pytest.mark.parametrize("caller", ["", "af", "Admin", "dma", "SUPPLIER"])
    def test_unknown_roles_get_default(self, caller: str) -> None:
        assert redacted_fields(caller) == DEFAULT_REDACTION

    def test_known_role(self) -> None:
        assert redacted_fields("DMA") == frozenset({"dma_cert"})


class TestRedactRecord:
    def test_af_clears_exactly_its_fields(self, full_record: AssetRecord) -> None:
        result = redact_record(full_record, "AF")
        assert _cleared(full_record, result) == {
            "matnr_af",
            "po_supp",
            "dma_del_date",
            "supp_test",
            "gr_dma",
            "dma_cert",
        }
        assert result.asset_id == "SHP-001"
        assert result.po_dma == "PO-DMA-1"
        assert result.truck_mod == "T-800"
        assert result.dma_cert == DocumentCert(cert="")

    def test_dma_sees_everything_but_certificate(self, full_record: AssetRecord) -> None:
        result = redact_record(full_record, "DMA")
        assert _cleared(full_record, result) == {"dma_cert"}

    def test_supplier(self, full_record: AssetRecord) -> None:
        result = redact_record(full_record, "Supplier")
        assert _cleared(full_record, result) == REDACTION_POLICY[CallerRole.SUPPLIER]
        assert result.po_supp == "PO-SUP-1"
        assert result.truck_chnum == "CH-123"

    def test_transporter(self, full_record: AssetRecord) -> None:
        result = redact_record(full_record, "Transporter")
        assert _cleared(full_record, result) == REDACTION_POLICY[CallerRole.TRANSPORTER]
        assert result.transaction_type == "CREATE"
        assert result.owner_id == "DMA"
        assert result.v5c_id == "V5C-42"

    def test_unknown_role_clears_superset_of_af(self, full_record: AssetRecord) -> None:
        af = _cleared(full_record, redact_record(full_record, "AF"))
        unknown = _cleared(full_record, redact_record(full_record, "Intruder"))
        assert af < unknown
        # fields AF keeps but an unknown caller loses
        assert {"po_dma", "truck_mod", "owner_id"} <= unknown - af

    def test_unknown_role_keeps_only_the_key(self, full_record: AssetRecord) -> None:
        result = redact_record(full_record, "nobody")
        assert result == AssetRecord(asset_id="SHP-001")

    @pytest.mark.parametrize("caller", ["AF", "DMA", "Supplier", "Transporter", "other"])
    def test_idempotent(self, full_record: AssetRecord, caller: str) -> None:
        once = redact_record(full_record, caller)
        assert redact_record(once, caller) == once

    def test_input_not_mutated(self, full_record: AssetRecord) -> None:
        redact_record(full_record, "nobody")
        assert full_record == make_record()


class TestFilterResponse:
    def test_redacts_every_asset(self) -> None:
        response = AssetResponse(
            assetclass=AssetClass(name="shipment", prefix="SHP."),
            assetkey="SHP.SHP-001",
            assetstate=AssetState(asset=[make_record(), make_record(asset_id="SHP-002")]),
        )
        result = filter_response(response, "AF")
        assert [a.asset_id for a in result.assetstate.asset] == ["SHP-001", "SHP-002"]
        assert all(a.matnr_af == "" for a in result.assetstate.asset)
        assert result.assetkey == "SHP.SHP-001"
        assert result.assetclass.name == "shipment"

    def test_empty_response(self) -> None:
        assert filter_response(AssetResponse(), "AF") == AssetResponse()
