"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Builds the route registry and dispatcher lazily,
serves each call against a fresh local ledger stub, and centralizes
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from iotcp.output.formatters import format_result

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from iotcp.config.settings import IotcpSettings
    from iotcp.infrastructure.ledger import SqlStub
    from iotcp.services.dispatcher import Dispatcher
    from iotcp.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The dispatcher and ledger are initialized on first use so ``--help``
    and ``--version`` never load plugins or touch the database.
    """

    def __init__(self, settings: IotcpSettings) -> None:
        self.settings = settings
        self._dispatcher: Dispatcher | None = None
        self._engine: Engine | None = None

        from iotcp.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from iotcp.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def dispatcher(self) -> Dispatcher:
        """The dispatcher over a sealed registry (created lazily on first access)."""
        if self._dispatcher is None:
            from iotcp.plugins.manager import PluginManager
            from iotcp.services.dispatcher import Dispatcher
            from iotcp.services.errors import DuplicateRouteError
            from iotcp.services.registry import create_registry

            pm = PluginManager()
            pm.discover_and_load(self.settings.plugins)
            try:
                registry = create_registry(pm)
            except DuplicateRouteError as exc:
                msg = f"Route configuration error: {exc}"
                raise click.ClickException(msg) from exc
            self._dispatcher = Dispatcher(registry)
        return self._dispatcher

    @property
    def engine(self) -> Engine:
        """The local ledger database engine (created lazily on first access)."""
        if self._engine is None:
            from iotcp.infrastructure.database.engine import init_database

            self._engine = init_database(self.settings.ledger_path)
        return self._engine

    def run(
        self,
        function: str,
        args: list[str],
        call: Callable[[SqlStub], ServiceResult],
        *,
        mutating: bool,
    ) -> ServiceResult:
        """Serve one call against a fresh stub and commit its outcome.

        State writes are committed only for successful *mutating* calls;
        published events are always recorded.
        """
        from iotcp.infrastructure.ledger import SqlStub

        stub = SqlStub(self.engine, function, args)
        result = call(stub)
        stub.commit(write_state=mutating and result.ok)
        return result

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        json_output = self.settings.json_output
        output = format_result(result, json_output=json_output)
        if result.ok:
            click.echo(output)
            if not json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
