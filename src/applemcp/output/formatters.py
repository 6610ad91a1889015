"""Rich/JSON output helpers for the CLI.

The MCP server always returns plain text. The CLI additionally offers
``--json`` for machines and Rich tables for the listing commands.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from applemcp.output.console import create_console, get_output
from applemcp.output.renderers import render_text

if TYPE_CHECKING:
    from applemcp.services.result import ServiceResult


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise the same text an MCP
            client would receive.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    return render_text(result)


def format_tool_table(tools: Iterable[Mapping[str, Any]]) -> str:
    """Render tool metadata as a table of name, operations and description."""
    table = Table(title="Tools", show_lines=False)
    table.add_column("Name", style="apple.tool", no_wrap=True)
    table.add_column("Operations")
    table.add_column("Description")
    for tool in tools:
        table.add_row(
            tool["name"],
            ", ".join(tool.get("operations", [])),
            escape(tool["description"]),
        )
    console = create_console()
    console.print(table)
    return get_output(console)


def format_access_report(report: Mapping[str, str | None]) -> str:
    """Render ``{domain: error-or-None}`` as one status line per domain."""
    console = create_console()
    for domain, problem in report.items():
        if problem is None:
            console.print(f"[apple.ok]✓[/apple.ok] {domain}")
        else:
            console.print(f"[apple.error]✗[/apple.error] {domain}: {escape(problem)}")
    return get_output(console)
