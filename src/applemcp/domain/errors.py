"""Error taxonomy for tool requests.

Every error carries a stable ``code`` and a user-facing ``message``.
SourceUnavailableError is recovered inside the aggregator; everything
else travels up to the request dispatcher and becomes an error result.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """Base for all request-level failures."""

    code = "TOOL_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class AccessDeniedError(ToolError):
    """The capability probe for a domain failed."""

    code = "ACCESS_DENIED"


class ArgumentValidationError(ToolError):
    """A required argument is missing or has the wrong type."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, detail={"field": field} if field else None)
        self.field = field


class UnknownToolError(ToolError):
    code = "UNKNOWN_TOOL"


class UnknownOperationError(ToolError):
    code = "UNKNOWN_OPERATION"


class SourceUnavailableError(ToolError):
    """One backing store could not be read or written."""

    code = "SOURCE_UNAVAILABLE"

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message, detail={"source": source})
        self.source = source


class DomainAccessError(ToolError):
    """Every backing store of a domain failed."""

    code = "DOMAIN_ACCESS"


class CreateFailedError(ToolError):
    code = "CREATE_FAILED"


class MutateFailedError(ToolError):
    code = "MUTATE_FAILED"
