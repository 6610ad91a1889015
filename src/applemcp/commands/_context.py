"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The dispatcher is built lazily so ``--help`` never
touches osascript or the Messages database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from applemcp.output.formatters import format_result

if TYPE_CHECKING:
    from applemcp.config.settings import AppleSettings
    from applemcp.infrastructure.bridge import AutomationBridge
    from applemcp.mcp.dispatcher import RequestDispatcher
    from applemcp.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: AppleSettings, *, bridge: AutomationBridge | None = None) -> None:
        self.settings = settings
        self._bridge = bridge
        self._dispatcher: RequestDispatcher | None = None

        from applemcp.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from applemcp.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def dispatcher(self) -> RequestDispatcher:
        """The request dispatcher (created lazily on first access)."""
        if self._dispatcher is None:
            from applemcp.mcp.server import build_dispatcher

            self._dispatcher = build_dispatcher(self.settings, bridge=self._bridge)
        return self._dispatcher

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout and returns normally.
        * Failure: writes to stderr and exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
