"""MCP tool definitions — one tool per domain.

``call_tool_impl`` is testable without a running server. ``register_tools()``
wraps it with FastMCP decorators. Wrapper parameters carry the wire names,
descriptions and operation enums of :mod:`applemcp.mcp.catalog`, so the
schema FastMCP advertises matches ``applemcp tools``.
"""

from __future__ import annotations

from typing import Annotated, Any

from mcp.server.fastmcp.exceptions import ToolError as McpToolError
from pydantic import Field

from applemcp.domain.types import Domain
from applemcp.mcp.catalog import tool_spec
from applemcp.mcp.dispatcher import RequestDispatcher


def _present(params: dict[str, Any]) -> dict[str, Any]:
    """Drop parameters the client did not send."""
    return {key: value for key, value in params.items() if value is not None}


def call_tool_impl(dispatcher: RequestDispatcher, name: str, params: dict[str, Any]) -> str:
    """Dispatch one tool call and return its text.

    Raises the FastMCP ToolError on failure so the host receives an
    ``isError`` result carrying the rendered message.
    """
    response = dispatcher.handle(name, _present(params))
    if response.is_error:
        raise McpToolError(response.text)
    return response.text


def _spec(domain: Domain) -> dict[str, Any]:
    spec = tool_spec(domain.value)
    assert spec is not None
    return spec


def _description(domain: Domain) -> str:
    return str(_spec(domain)["description"])


def _param(domain: Domain, name: str) -> Any:
    """Schema for one wrapper parameter, taken from the catalog.

    The enum is schema-only; unknown operations still reach the router
    and get its error message.
    """
    schema = _spec(domain)["inputSchema"]["properties"][name]
    extra = {"enum": list(schema["enum"])} if "enum" in schema else None
    return Field(description=schema["description"], json_schema_extra=extra)


def register_tools(server: Any, dispatcher: RequestDispatcher) -> None:
    """Register the five tools on the FastMCP server."""

    @server.tool(name="contacts", description=_description(Domain.CONTACTS))  # type: ignore[untyped-decorator]
    def contacts(
        name: Annotated[str | None, _param(Domain.CONTACTS, "name")] = None,
    ) -> str:
        return call_tool_impl(dispatcher, "contacts", {"name": name})

    @server.tool(name="notes", description=_description(Domain.NOTES))  # type: ignore[untyped-decorator]
    def notes(
        searchText: Annotated[str | None, _param(Domain.NOTES, "searchText")] = None,  # noqa: N803
    ) -> str:
        return call_tool_impl(dispatcher, "notes", {"searchText": searchText})

    @server.tool(name="messages", description=_description(Domain.MESSAGES))  # type: ignore[untyped-decorator]
    def messages(
        operation: Annotated[str, _param(Domain.MESSAGES, "operation")],
        phoneNumber: Annotated[str | None, _param(Domain.MESSAGES, "phoneNumber")] = None,  # noqa: N803
        message: Annotated[str | None, _param(Domain.MESSAGES, "message")] = None,
        limit: Annotated[int | None, _param(Domain.MESSAGES, "limit")] = None,
        scheduledTime: Annotated[str | None, _param(Domain.MESSAGES, "scheduledTime")] = None,  # noqa: N803
    ) -> str:
        return call_tool_impl(
            dispatcher,
            "messages",
            {
                "operation": operation,
                "phoneNumber": phoneNumber,
                "message": message,
                "limit": limit,
                "scheduledTime": scheduledTime,
            },
        )

    @server.tool(name="reminders", description=_description(Domain.REMINDERS))  # type: ignore[untyped-decorator]
    def reminders(
        operation: Annotated[str, _param(Domain.REMINDERS, "operation")],
        searchText: Annotated[str | None, _param(Domain.REMINDERS, "searchText")] = None,  # noqa: N803
        title: Annotated[str | None, _param(Domain.REMINDERS, "title")] = None,
        notes: Annotated[str | None, _param(Domain.REMINDERS, "notes")] = None,
        dueDate: Annotated[str | None, _param(Domain.REMINDERS, "dueDate")] = None,  # noqa: N803
        id: Annotated[str | None, _param(Domain.REMINDERS, "id")] = None,  # noqa: A002
    ) -> str:
        return call_tool_impl(
            dispatcher,
            "reminders",
            {
                "operation": operation,
                "searchText": searchText,
                "title": title,
                "notes": notes,
                "dueDate": dueDate,
                "id": id,
            },
        )

    @server.tool(name="calendar", description=_description(Domain.CALENDAR))  # type: ignore[untyped-decorator]
    def calendar(
        operation: Annotated[str, _param(Domain.CALENDAR, "operation")],
        searchText: Annotated[str | None, _param(Domain.CALENDAR, "searchText")] = None,  # noqa: N803
        startDate: Annotated[str | None, _param(Domain.CALENDAR, "startDate")] = None,  # noqa: N803
        endDate: Annotated[str | None, _param(Domain.CALENDAR, "endDate")] = None,  # noqa: N803
        title: Annotated[str | None, _param(Domain.CALENDAR, "title")] = None,
        description: Annotated[str | None, _param(Domain.CALENDAR, "description")] = None,
        location: Annotated[str | None, _param(Domain.CALENDAR, "location")] = None,
        duration: Annotated[float | None, _param(Domain.CALENDAR, "duration")] = None,
    ) -> str:
        return call_tool_impl(
            dispatcher,
            "calendar",
            {
                "operation": operation,
                "searchText": searchText,
                "startDate": startDate,
                "endDate": endDate,
                "title": title,
                "description": description,
                "location": location,
                "duration": duration,
            },
        )
