"""End-to-end tests for the deploy, invoke and query commands."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner, Result

from iotcp.cli import cli
from tests.conftest import request_json


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", *args])


def _ok(result: Result) -> dict[str, Any]:
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    return payload["data"]


def _create(runner: CliRunner, asset_id: str = "SHP-001") -> None:
    request = request_json(
        caller="DMA",
        assetID=asset_id,
        ownerId="DMA",
        matnrAf="MAT-77",
        poDma="PO-DMA-1",
        truckMod="T-800",
        dmaCert={"cert": "BASE64CERT"},
    )
    _ok(_run(runner, "invoke", "createAsset", request))


@pytest.mark.usefixtures("_isolated_project")
class TestDeploy:
    def test_uses_configured_version(self, cli_runner: CliRunner) -> None:
        data = _ok(_run(cli_runner, "deploy", "{}"))
        assert data == {"version": "3.1.4", "handlers": 1}

    def test_version_override(self, cli_runner: CliRunner) -> None:
        data = _ok(_run(cli_runner, "deploy", "{}", "--contract-version", "2.0.0"))
        assert data["version"] == "2.0.0"

    def test_missing_args_fails(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "deploy")
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "MISSING_ARGUMENT"

    def test_handler_failure_reports_error_event(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "deploy", "[1, 2]")
        assert result.exit_code == 1
        events = _ok(_run(cli_runner, "events"))["items"]
        assert events[0]["function"] == "init"
        assert events[0]["payload"] == {
            "status": "ERROR",
            "message": "initShipments payload must be a JSON object",
        }


@pytest.mark.usefixtures("_isolated_project")
class TestInvoke:
    def test_create_reports_ok_event(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "invoke", "createAsset", request_json(assetID="SHP-001"))
        data = _ok(result)
        assert data["function"] == "createAsset"
        assert data["event"] == {
            "assetID": "SHP-001",
            "eventfunction": "createAsset",
            "status": "OK",
        }

    def test_unknown_function_exits_1(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "invoke", "launchRocket", "{}")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "ROUTE_NOT_FOUND"
        events = _ok(_run(cli_runner, "events"))["items"]
        assert events[0]["payload"]["status"] == "ERROR"

    def test_failed_invoke_does_not_write_state(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        result = _run(cli_runner, "invoke", "createAsset", request_json(assetID="SHP-001"))
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "INVOKE_HANDLER_FAILED"
        assert error["message"] == "shipment SHP-001 already exists"

    def test_update_then_delete(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        _ok(_run(cli_runner, "invoke", "updateAsset", request_json(assetID="SHP-001", grAf="G")))
        read = _ok(
            _run(cli_runner, "query", "readAsset", request_json(caller="DMA", assetID="SHP-001"))
        )
        record = read["response"]["assetstate"]["asset"][0]
        assert record["grAf"] == "G"
        assert record["truckMod"] == "T-800"

        _ok(_run(cli_runner, "invoke", "deleteAsset", request_json(assetID="SHP-001")))
        gone = _run(cli_runner, "query", "readAsset", request_json(assetID="SHP-001"))
        assert gone.exit_code == 1
        assert json.loads(gone.stderr)["error"]["code"] == "QUERY_HANDLER_FAILED"


@pytest.mark.usefixtures("_isolated_project")
class TestQuery:
    def test_af_caller_is_redacted(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        data = _ok(
            _run(cli_runner, "query", "readAsset", request_json(caller="AF", assetID="SHP-001"))
        )
        record = data["response"]["assetstate"]["asset"][0]
        assert record["assetID"] == "SHP-001"
        assert record["matnrAf"] == ""
        assert record["dmaCert"] == {"cert": ""}
        assert record["poDma"] == "PO-DMA-1"
        assert record["truckMod"] == "T-800"

    def test_unknown_caller_sees_only_the_key(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        data = _ok(_run(cli_runner, "query", "readAsset", request_json(assetID="SHP-001")))
        record = data["response"]["assetstate"]["asset"][0]
        assert record["assetID"] == "SHP-001"
        assert record["poDma"] == ""
        assert record["ownerId"] == ""

    def test_query_publishes_no_event(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        before = _ok(_run(cli_runner, "events"))["count"]
        _ok(_run(cli_runner, "query", "readAsset", request_json(caller="AF", assetID="SHP-001")))
        assert _ok(_run(cli_runner, "events"))["count"] == before

    def test_read_all_routes(self, cli_runner: CliRunner) -> None:
        data = _ok(_run(cli_runner, "query", "readAllRoutes"))
        names = {row["functionname"] for row in data["response"]}
        assert {"initShipments", "createAsset", "readAsset", "readAllRoutes"} <= names

    def test_wire_output_is_the_redacted_response(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        request = request_json(caller="AF", assetID="SHP-001")
        result = cli_runner.invoke(cli, ["query", "readAsset", "--wire", request])
        assert result.exit_code == 0, result.output
        response = json.loads(result.stdout)
        assert response["assetkey"] == "SHP.SHP-001"
        [record] = response["assetstate"]["asset"]
        assert record["matnrAf"] == ""
        assert record["poDma"] == "PO-DMA-1"

    def test_wire_output_failure_still_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["query", "readAsset", "--wire", request_json(assetID="NOPE")]
        )
        assert result.exit_code == 1
        assert "QUERY_HANDLER_FAILED" in result.stderr

    def test_human_output(self, cli_runner: CliRunner) -> None:
        _create(cli_runner)
        result = cli_runner.invoke(
            cli, ["query", "readAsset", request_json(caller="AF", assetID="SHP-001")]
        )
        assert result.exit_code == 0
        assert result.stdout.startswith("OK: query")
        assert "function: readAsset" in result.stdout
