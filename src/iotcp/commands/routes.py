"""Command: list registered routes without touching the ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from iotcp.commands._base import IotcpCommand
from iotcp.services.result import ServiceResult

if TYPE_CHECKING:
    from iotcp.commands._context import AppContext


@click.command(
    cls=IotcpCommand,
    examples="""\
  iotcp routes
  iotcp routes --method query
  iotcp --json routes""",
)
@click.option(
    "--method",
    type=click.Choice(["deploy", "invoke", "query"]),
    default=None,
    help="Only show routes registered for this method.",
)
@click.pass_obj
def routes(app: AppContext, method: str | None) -> None:
    """List registered routes and their owning asset classes."""
    rows = {
        r.function_name: f"{r.method} ({r.owner.name})"
        for r in sorted(app.dispatcher.registry.routes(), key=lambda r: r.function_name)
        if method is None or r.method == method
    }
    app.emit(ServiceResult(ok=True, op="routes", data=rows, meta={"count": len(rows)}))
