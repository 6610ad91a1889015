"""Subcommand modules for applemcp.

register_commands() uses deferred imports to keep ``applemcp --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from applemcp.commands.call import call
    from applemcp.commands.check import check
    from applemcp.commands.serve import serve
    from applemcp.commands.tools import tools

    cli.add_command(serve)
    cli.add_command(tools)
    cli.add_command(call)
    cli.add_command(check)
