"""Command: run a state-mutating invoke function."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from iotcp.commands._base import IotcpCommand

if TYPE_CHECKING:
    from iotcp.commands._context import AppContext


@click.command(
    cls=IotcpCommand,
    examples="""\
  iotcp invoke createAsset '{"asset": {"assetID": "SHP-001", "ownerId": "DMA"}}'
  iotcp invoke updateAsset '{"asset": {"assetID": "SHP-001", "grAf": "2026-10-01"}}'
  iotcp --json invoke deleteAsset '{"asset": {"assetID": "SHP-001"}}'""",
)
@click.argument("function")
@click.argument("args", nargs=-1)
@click.pass_obj
def invoke(app: AppContext, function: str, args: tuple[str, ...]) -> None:
    """Invoke FUNCTION with ARGS and report the result event."""
    dispatcher = app.dispatcher
    app.emit(
        app.run(
            function,
            list(args),
            lambda stub: dispatcher.invoke(stub, function, list(args)),
            mutating=True,
        )
    )
