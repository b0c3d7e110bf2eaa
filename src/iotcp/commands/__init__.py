"""Subcommand modules for iotcp.

Provides register_commands() which uses deferred imports to keep
``iotcp --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the protocol commands and the diagnostics commands."""
    from iotcp.commands.deploy import deploy
    from iotcp.commands.events import events
    from iotcp.commands.invoke import invoke
    from iotcp.commands.query import query
    from iotcp.commands.routes import routes

    cli.add_command(deploy)
    cli.add_command(invoke)
    cli.add_command(query)

    cli.add_command(routes)
    cli.add_command(events)
