"""serve — start the MCP server."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from applemcp.commands._base import AppleCommand

if TYPE_CHECKING:
    from applemcp.commands._context import AppContext

log = structlog.get_logger(__name__)


@click.command(
    cls=AppleCommand,
    examples="""\
  # Start the MCP server (stdio transport, default)
  applemcp serve

  # Streamable HTTP on custom host/port
  applemcp serve --transport streamable-http --host 0.0.0.0 --port 9000

  # SSE transport on the address from applemcp.toml
  applemcp serve --transport sse""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    help="MCP transport protocol (default: [mcp] transport, else stdio).",
)
@click.option("--host", default=None, help="Bind address (HTTP transports only).")
@click.option("--port", default=None, type=int, help="Listen port (HTTP transports only).")
@click.pass_obj
def serve(app: AppContext, transport: str | None, host: str | None, port: int | None) -> None:
    """Start the MCP server exposing the five Apple tools.

    Scheduled messages only live as long as this process; any still
    pending when the server stops are dropped with a warning.
    """
    from applemcp.mcp.server import create_server

    dispatcher = app.dispatcher
    server = create_server(app.settings, host=host, port=port, dispatcher=dispatcher)
    try:
        server.run(transport=transport or app.settings.mcp.transport)
    finally:
        dropped = dispatcher.context.scheduler.cancel_all()
        if dropped:
            log.warning("scheduler.dropped", pending=dropped)
