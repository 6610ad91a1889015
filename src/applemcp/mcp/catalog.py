"""Tool catalog: names, descriptions and input schemas of the five tools.

``applemcp tools`` prints these schemas verbatim. The FastMCP wrappers in
:mod:`applemcp.mcp.tools` take their parameter descriptions and operation
enums from here, so MCP clients are offered the same schema.
"""

from __future__ import annotations

from typing import Any

from applemcp.domain.types import OPERATIONS, Domain


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def _operation(domain: Domain) -> dict[str, Any]:
    ops = OPERATIONS[domain]
    quoted = ", ".join(f"'{op}'" for op in ops[:-1]) + f", or '{ops[-1]}'"
    return {
        "type": "string",
        "description": f"Operation to perform: {quoted}",
        "enum": list(ops),
    }


TOOL_SPECS: list[dict[str, Any]] = [
    {
        "name": Domain.CONTACTS.value,
        "description": "Search and retrieve contacts from Apple Contacts app",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": _string(
                    "Name to search for (optional - if not provided, returns all "
                    "contacts). Can be partial name to search."
                ),
            },
        },
    },
    {
        "name": Domain.NOTES.value,
        "description": "Search and retrieve notes from Apple Notes app",
        "inputSchema": {
            "type": "object",
            "properties": {
                "searchText": _string(
                    "Text to search for in notes (optional - if not provided, returns all notes)"
                ),
            },
        },
    },
    {
        "name": Domain.MESSAGES.value,
        "description": (
            "Interact with Apple Messages app - send, read, schedule messages "
            "and check unread messages"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "operation": _operation(Domain.MESSAGES),
                "phoneNumber": _string(
                    "Phone number to send message to "
                    "(required for send, read, and schedule operations)"
                ),
                "message": _string("Message to send (required for send and schedule operations)"),
                "limit": _number(
                    "Number of messages to read (optional, for read and unread operations)"
                ),
                "scheduledTime": _string(
                    "ISO string of when to send the message (required for schedule operation)"
                ),
            },
            "required": ["operation"],
        },
    },
    {
        "name": Domain.REMINDERS.value,
        "description": (
            "Interact with Apple Reminders app - get, find, create, and complete reminders"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "operation": _operation(Domain.REMINDERS),
                "searchText": _string(
                    "Text to search for in reminder titles and notes (required for find operation)"
                ),
                "title": _string("Title of the reminder (required for create operation)"),
                "notes": _string(
                    "Notes/description for the reminder (optional for create operation)"
                ),
                "dueDate": _string(
                    "ISO string of when the reminder is due (optional for create operation)"
                ),
                "id": _string("ID of the reminder to complete (required for complete operation)"),
            },
            "required": ["operation"],
        },
    },
    {
        "name": Domain.CALENDAR.value,
        "description": "Interact with Apple Calendar app - get, find, and create calendar events",
        "inputSchema": {
            "type": "object",
            "properties": {
                "operation": _operation(Domain.CALENDAR),
                "searchText": _string(
                    "Text to search for in event titles, descriptions, or locations "
                    "(required for find operation)"
                ),
                "startDate": _string(
                    "ISO string of when to start searching for events, or event start "
                    "time (for find or create operations)"
                ),
                "endDate": _string(
                    "ISO string of when to end searching for events (optional for find operation)"
                ),
                "title": _string("Title of the event (required for create operation)"),
                "description": _string("Description of the event (optional for create operation)"),
                "location": _string("Location of the event (optional for create operation)"),
                "duration": _number(
                    "Duration of the event in minutes (required for create operation)"
                ),
            },
            "required": ["operation"],
        },
    },
]


def tool_spec(name: str) -> dict[str, Any] | None:
    """Return the catalog entry for *name*, or None when unknown."""
    return next((spec for spec in TOOL_SPECS if spec["name"] == name), None)


def list_tools() -> list[dict[str, Any]]:
    """Tool metadata with the operation set of each tool."""
    return [{**spec, "operations": list(OPERATIONS[Domain(spec["name"])])} for spec in TOOL_SPECS]
