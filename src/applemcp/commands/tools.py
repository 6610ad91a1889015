"""tools — list the tools the server advertises."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from applemcp.commands._base import AppleCommand

if TYPE_CHECKING:
    from applemcp.commands._context import AppContext


@click.command(
    cls=AppleCommand,
    examples="""\
  applemcp tools
  applemcp --json tools""",
)
@click.pass_obj
def tools(app: AppContext) -> None:
    """List tool names, operations and descriptions."""
    from applemcp.mcp.catalog import list_tools
    from applemcp.output.formatters import format_tool_table

    catalog = list_tools()
    if app.settings.json_output:
        click.echo(json.dumps(catalog, indent=2))
    else:
        click.echo(format_tool_table(catalog), nl=False)
