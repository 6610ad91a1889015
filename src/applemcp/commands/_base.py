"""AppleCommand — click.Command with an ``--examples`` flag.

Usage examples are kept out of ``--help`` and printed on demand::

    @click.command(cls=AppleCommand, examples="  applemcp tools")
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    assert isinstance(command, AppleCommand)
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(command.examples)
    ctx.exit(0)


class AppleCommand(click.Command):
    """A command that can show usage examples and exit."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples or ""
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples and exit.",
                )
            )
