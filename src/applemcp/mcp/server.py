"""FastMCP server setup.

Transport: stdio by default, SSE or streamable HTTP on request.
One OsascriptBridge and one ToolContext live for the whole process, so
scheduled messages survive between requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from applemcp.infrastructure.osascript import OsascriptBridge
from applemcp.mcp.dispatcher import RequestDispatcher
from applemcp.mcp.tools import register_tools
from applemcp.services.base import ToolContext

if TYPE_CHECKING:
    from applemcp.config.settings import AppleSettings
    from applemcp.infrastructure.bridge import AutomationBridge

__all__ = ["build_dispatcher", "create_server"]


def build_dispatcher(
    settings: AppleSettings, *, bridge: AutomationBridge | None = None
) -> RequestDispatcher:
    """Wire a RequestDispatcher from *settings*.

    *bridge* overrides the osascript bridge (tests pass an in-memory one).
    """
    if bridge is None:
        bridge = OsascriptBridge(
            osascript_path=settings.bridge.osascript_path,
            timeout=settings.bridge.timeout_seconds,
            chat_db=settings.messages.chat_db,
        )
    return RequestDispatcher(ToolContext(bridge=bridge, messages=settings.messages))


def create_server(
    settings: AppleSettings | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
    bridge: AutomationBridge | None = None,
    dispatcher: RequestDispatcher | None = None,
) -> FastMCP:
    """Create and configure the MCP server.

    *host* and *port* configure the bind address for HTTP transports
    and default to the ``[mcp]`` settings. They are ignored for stdio.
    Pass *dispatcher* to keep a handle on its scheduler; otherwise one is
    built from *settings* and *bridge*.
    """
    if settings is None:
        from applemcp.config.settings import AppleSettings

        settings = AppleSettings.from_cli()

    server = FastMCP(
        settings.mcp.name,
        host=host or settings.mcp.host,
        port=port or settings.mcp.port,
    )
    if dispatcher is None:
        dispatcher = build_dispatcher(settings, bridge=bridge)
    register_tools(server, dispatcher)
    return server
