"""call — invoke one tool from the command line, as an MCP client would."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from applemcp.commands._base import AppleCommand

if TYPE_CHECKING:
    from applemcp.commands._context import AppContext


def parse_pairs(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``("key=value", "key:=json", ...)`` into an argument mapping.

    ``key=value`` always passes a string, so phone numbers and ids made
    of digits stay strings. ``key:=value`` decodes the value as JSON for
    numbers and booleans (``limit:=5``).
    """
    args: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key or key == ":":
            msg = f"Expected key=value or key:=json, got {pair!r}"
            raise click.BadParameter(msg, param_hint="'-a'")
        if key.endswith(":"):
            key = key[:-1]
            try:
                args[key] = json.loads(value)
            except json.JSONDecodeError as exc:
                msg = f"Invalid JSON for {key!r}: {exc.msg}"
                raise click.BadParameter(msg, param_hint="'-a'") from exc
        else:
            args[key] = value
    return args


@click.command(
    cls=AppleCommand,
    examples="""\
  applemcp call contacts -a name=John
  applemcp call reminders -a operation=find -a searchText=milk
  applemcp call messages -a operation=read -a phoneNumber=5551234567 -a limit:=5
  applemcp call calendar --args '{"operation": "create", "title": "Standup",
                                  "startDate": "2026-11-02T09:00:00", "duration": 15}'""",
)
@click.argument("tool")
@click.option(
    "-a",
    "--arg",
    "pairs",
    multiple=True,
    help="Argument as key=value (string) or key:=json (repeatable).",
)
@click.option("--args", "args_json", default=None, help="All arguments as a JSON object.")
@click.pass_obj
def call(app: AppContext, tool: str, pairs: tuple[str, ...], args_json: str | None) -> None:
    """Invoke TOOL with the given arguments and print the result."""
    args: dict[str, Any] = {}
    if args_json:
        try:
            decoded = json.loads(args_json)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="'--args'") from exc
        if not isinstance(decoded, dict):
            raise click.BadParameter("must be a JSON object", param_hint="'--args'")
        args.update(decoded)
    args.update(parse_pairs(pairs))

    response = app.dispatcher.handle(tool, args)
    assert response.result is not None
    app.emit(response.result)
