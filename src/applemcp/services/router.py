"""OperationRouter — validate arguments and pick the handler.

Order of checks for every request:

1. the operation belongs to the domain's operation set, else
   UnknownOperationError;
2. the raw arguments satisfy the operation's argument record, else
   ArgumentValidationError naming the first offending field;
3. the handler runs. Handlers are the only code that reaches the
   aggregator or a collection source, so no side effect can happen
   before validation has fully succeeded.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from applemcp.domain.arguments import ARGUMENT_MODELS, ArgumentSet
from applemcp.domain.errors import ArgumentValidationError, UnknownOperationError
from applemcp.domain.types import IMPLICIT_OPERATION, OPERATIONS, Domain
from applemcp.services.base import BaseService, ToolContext
from applemcp.services.calendar import CalendarService
from applemcp.services.contacts import ContactsService
from applemcp.services.messages import MessagesService
from applemcp.services.notes import NotesService
from applemcp.services.reminders import RemindersService
from applemcp.services.result import ServiceResult

SERVICES: dict[Domain, type[BaseService]] = {
    Domain.CONTACTS: ContactsService,
    Domain.NOTES: NotesService,
    Domain.MESSAGES: MessagesService,
    Domain.REMINDERS: RemindersService,
    Domain.CALENDAR: CalendarService,
}

_TYPE_NAMES = {
    "string_type": "a string",
    "int_type": "an integer",
    "float_type": "a number",
    "bool_type": "a boolean",
}


def describe_error(error: ErrorDetails) -> tuple[str | None, str]:
    """Return ``(field, message)`` for one pydantic error entry."""
    field = str(error["loc"][0]) if error["loc"] else None
    kind = error["type"]
    if field is None:
        return None, error["msg"].removeprefix("Value error, ")
    if kind == "missing":
        return field, f"'{field}' is required"
    if kind in _TYPE_NAMES:
        return field, f"'{field}' must be {_TYPE_NAMES[kind]}"
    if kind == "string_too_short":
        return field, f"'{field}' must not be empty"
    if kind in ("greater_than_equal", "greater_than", "less_than_equal", "less_than"):
        return field, f"'{field}' {error['msg'].lower()}"
    return field, f"'{field}': {error['msg'].removeprefix('Value error, ')}"


def validate_arguments(domain: Domain, operation: str, raw: Mapping[str, Any]) -> ArgumentSet:
    """Validate *raw* against the argument record for ``(domain, operation)``."""
    model = ARGUMENT_MODELS[(domain, operation)]
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        field, detail = describe_error(exc.errors()[0])
        msg = f"Invalid arguments for {domain.value}.{operation}: {detail}"
        raise ArgumentValidationError(msg, field=field) from None


def resolve_operation(domain: Domain, raw: Mapping[str, Any]) -> str:
    """Pick the operation name out of the raw arguments."""
    implicit = IMPLICIT_OPERATION.get(domain)
    operation = raw.get("operation", implicit)
    if operation is None:
        msg = f"Invalid arguments for {domain.value}: 'operation' is required"
        raise ArgumentValidationError(msg, field="operation")
    if not isinstance(operation, str):
        msg = f"Invalid arguments for {domain.value}: 'operation' must be a string"
        raise ArgumentValidationError(msg, field="operation")
    if operation not in OPERATIONS[domain]:
        allowed = ", ".join(OPERATIONS[domain])
        msg = f"Unknown operation '{operation}' for {domain.value} (expected one of: {allowed})"
        raise UnknownOperationError(msg, detail={"allowed": list(OPERATIONS[domain])})
    return operation


class OperationRouter:
    """Map ``(domain, operation)`` to a validated handler call."""

    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    def handler_for(self, domain: Domain, operation: str) -> Callable[[Any], ServiceResult]:
        service = SERVICES[domain](self._ctx)
        handler: Callable[[Any], ServiceResult] = getattr(service, operation)
        return handler

    def route(self, domain: Domain, raw: Mapping[str, Any]) -> ServiceResult:
        operation = resolve_operation(domain, raw)
        args = validate_arguments(domain, operation, raw)
        return self.handler_for(domain, operation)(args)
