"""Shared pytest fixtures and test helpers for iotcp tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from iotcp.domain.assets import AssetRecord, DocumentCert
from iotcp.infrastructure.memory import MemoryStub
from iotcp.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory with a minimal iotcp.toml."""
    (tmp_path / "iotcp.toml").write_text('[contract]\nversion = "3.1.4"\n', encoding="utf-8")
    return tmp_path


@pytest.fixture
def _isolated_project(
    project_root: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Change CWD to a temp project so the CLI uses an isolated ledger."""
    monkeypatch.chdir(project_root)
    monkeypatch.delenv("IOTCP_CONFIG", raising=False)
    yield
    disable_telemetry()


@pytest.fixture
def full_record() -> AssetRecord:
    """A shipment record with every field populated."""
    return make_record()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_record(**overrides: Any) -> AssetRecord:
    """Build a shipment record with every field set to a recognizable value."""
    values: dict[str, Any] = {
        "transaction_type": "CREATE",
        "owner_id": "DMA",
        "asset_id": "SHP-001",
        "matnr_af": "MAT-77",
        "po_dma": "PO-DMA-1",
        "po_supp": "PO-SUP-1",
        "dma_del_date": "2026-09-01",
        "af_del_date": "2026-09-15",
        "truck_mod": "T-800",
        "truck_pdate": "2026-08-20",
        "truck_chnum": "CH-123",
        "truck_ennum": "EN-456",
        "supp_test": "PASS",
        "gr_dma": "GR-D",
        "gr_af": "GR-A",
        "dma_masdat": "MD-9",
        "af_dma_test": "OK",
        "dma_cert": DocumentCert(cert="BASE64CERT"),
        "af_doc": "DOC-1",
        "caller": "DMA",
        "v5c_id": "V5C-42",
    }
    values.update(overrides)
    return AssetRecord(**values)


def request_json(caller: str = "", **asset: Any) -> str:
    """Encode a ``{"asset": {...}}`` request argument."""
    body = dict(asset)
    if caller:
        body["caller"] = caller
    return json.dumps({"asset": body})


def event_payloads(stub: MemoryStub) -> list[dict[str, Any]]:
    """Decode every event payload published on *stub*."""
    return [json.loads(payload) for _name, payload in stub.events]
