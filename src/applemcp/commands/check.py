"""check — probe every domain and report which permissions are missing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from applemcp.commands._base import AppleCommand

if TYPE_CHECKING:
    from applemcp.commands._context import AppContext


@click.command(
    cls=AppleCommand,
    examples="""\
  applemcp check
  applemcp --json check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Check access to Contacts, Notes, Messages, Reminders and Calendar."""
    from applemcp.domain.types import Domain
    from applemcp.output.formatters import format_access_report
    from applemcp.services.gate import remediation_message
    from applemcp.services.result import ServiceError, ServiceResult

    gate = app.dispatcher.context.gate
    report: dict[str, str | None] = {
        domain.value: None if gate.is_granted(domain) else remediation_message(domain)
        for domain in Domain
    }

    denied = [name for name, problem in report.items() if problem is not None]
    if denied:
        result = ServiceResult(
            ok=False,
            op="check",
            data={"domains": report},
            error=ServiceError(
                code="ACCESS_DENIED",
                message=f"No access to: {', '.join(denied)}",
                detail={"domains": report},
            ),
        )
    else:
        result = ServiceResult(ok=True, op="check", data={"domains": report})

    if app.settings.json_output:
        app.emit(result)
        return
    click.echo(format_access_report(report), nl=False)
    if denied:
        raise SystemExit(1)
