"""Command: show result events recorded by the local ledger."""

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
  iotcp events
  iotcp --json events --limit 5""",
)
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum events shown.")
@click.pass_obj
def events(app: AppContext, limit: int) -> None:
    """Show the most recent result events, newest first."""
    from iotcp.infrastructure.ledger import recent_events

    items = recent_events(app.engine, limit=limit)
    app.emit(ServiceResult(ok=True, op="events", data={"count": len(items), "items": items}))
