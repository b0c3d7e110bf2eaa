"""Command: run a read-only query, redacted for the requesting caller."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from iotcp.commands._base import IotcpCommand

if TYPE_CHECKING:
    from iotcp.commands._context import AppContext


@click.command(
    cls=IotcpCommand,
    examples="""\
  iotcp query readAsset '{"asset": {"assetID": "SHP-001", "caller": "AF"}}'
  iotcp --json query readAsset '{"asset": {"assetID": "SHP-001", "caller": "Transporter"}}'
  iotcp query readAsset --wire '{"asset": {"assetID": "SHP-001", "caller": "DMA"}}'
  iotcp query readAllRoutes""",
)
@click.argument("function")
@click.argument("args", nargs=-1)
@click.option(
    "--wire",
    is_flag=True,
    help="Print only the response bytes a contract caller receives.",
)
@click.pass_obj
def query(app: AppContext, function: str, args: tuple[str, ...], wire: bool) -> None:
    """Query FUNCTION with ARGS.

    The caller identity is read from ``asset.caller`` in the first argument.
    """
    dispatcher = app.dispatcher
    result = app.run(
        function,
        list(args),
        lambda stub: dispatcher.query(stub, function, list(args)),
        mutating=False,
    )
    payload = result.serialize() if wire else None
    if payload is None:
        app.emit(result)
        return
    click.echo(payload.decode("utf-8"))
