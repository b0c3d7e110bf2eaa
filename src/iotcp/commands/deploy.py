"""Command: run the deploy protocol against the local ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from iotcp.commands._base import IotcpCommand

if TYPE_CHECKING:
    from iotcp.commands._context import AppContext


@click.command(
    cls=IotcpCommand,
    examples="""\
  iotcp deploy '{"nickname": "TRADELANE"}'
  iotcp deploy '{}' --contract-version 2.0.1""",
)
@click.argument("args", nargs=-1)
@click.option(
    "--contract-version",
    default=None,
    help="Contract version passed to deploy handlers (default: [contract] version).",
)
@click.pass_obj
def deploy(app: AppContext, args: tuple[str, ...], contract_version: str | None) -> None:
    """Initialize the contract by running every deploy handler."""
    version = contract_version or app.settings.contract.version
    dispatcher = app.dispatcher
    app.emit(
        app.run(
            "init",
            list(args),
            lambda stub: dispatcher.deploy(stub, list(args), version),
            mutating=True,
        )
    )
