"""RequestDispatcher — the single entry point for tool invocations.

``handle()`` never raises. Every failure, expected or not, comes back as
a ToolResponse with ``isError`` set and a text of the form
``Error: <message>``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from applemcp.domain.errors import ArgumentValidationError, ToolError, UnknownToolError
from applemcp.domain.types import parse_domain
from applemcp.output.renderers import render_text
from applemcp.services.base import ToolContext
from applemcp.services.result import ServiceError, ServiceResult, ToolResponse
from applemcp.services.router import OperationRouter

log = structlog.get_logger(__name__)


class RequestDispatcher:
    """Route ``(tool name, raw arguments)`` to a handler and render the result."""

    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx
        self._router = OperationRouter(ctx)

    @property
    def context(self) -> ToolContext:
        return self._ctx

    def invoke(self, tool_name: str, raw_args: Any) -> ServiceResult:
        """Run one request and return its ServiceResult; ToolErrors propagate."""
        domain = parse_domain(tool_name)
        if domain is None:
            raise UnknownToolError(f"Unknown tool: {tool_name}", detail={"tool": tool_name})
        if raw_args is None:
            raise ArgumentValidationError("No arguments provided")
        if not isinstance(raw_args, Mapping):
            raise ArgumentValidationError("Arguments must be an object")
        return self._router.route(domain, raw_args)

    def handle(self, tool_name: str, raw_args: Any) -> ToolResponse:
        """Run one request and return its wire response."""
        try:
            result = self.invoke(tool_name, raw_args)
            return ToolResponse.from_text(render_text(result), result=result)
        except ToolError as exc:
            log.warning("request.failed", tool=tool_name, code=exc.code, error=exc.message)
            error = ServiceError(code=exc.code, message=exc.message, detail=exc.detail)
        except Exception as exc:
            log.exception("request.crashed", tool=tool_name)
            message = str(exc) or type(exc).__name__
            error = ServiceError(code="INTERNAL_ERROR", message=message)

        result = ServiceResult(ok=False, op=str(tool_name), error=error)
        return ToolResponse.from_text(render_text(result), is_error=True, result=result)
