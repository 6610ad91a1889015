"""ServiceResult, ServiceError and ToolResponse — the service contracts.

INVARIANT: every routed operation returns a ServiceResult, and the
request dispatcher turns every request into exactly one ToolResponse.
The MCP adapter and the CLI consume these types.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all tool operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Qualified operation name (e.g. ``"reminders.find"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (skipped sources, fallback searches).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans when verbose).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


class TextContent(BaseModel):
    model_config = {"frozen": True}

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Wire shape of a tool invocation: ``{content: [...], isError: bool}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")
    result: ServiceResult | None = Field(default=None, exclude=True)

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.content)

    @classmethod
    def from_text(
        cls, text: str, *, is_error: bool = False, result: ServiceResult | None = None
    ) -> ToolResponse:
        return cls(content=[TextContent(text=text)], is_error=is_error, result=result)
