"""Plain-text renderers for tool results.

Each renderer turns a successful ServiceResult into the text returned
to the MCP client. Renderers are pure and dispatched by ``result.op``
in :func:`render_text`; unknown ops fall through to a generic
key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from applemcp.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_text(result: ServiceResult) -> str:
    """Render a ServiceResult as the text content of a tool response."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"Error: {message}"

    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    text = renderer(result.data)
    if result.warnings:
        text += "\n\n" + "\n".join(f"Warning: {w}" for w in result.warnings)
    return text


# ── Helpers ───────────────────────────────────────────────────────────


def _when(value: str | None) -> str:
    """Format an ISO timestamp in local time."""
    if not value:
        return ""
    return datetime.fromisoformat(value).astimezone().strftime("%Y-%m-%d %H:%M")


def _render_generic(data: dict[str, Any]) -> str:
    lines = [
        f"{key}: {json.dumps(value, separators=(',', ':')) if isinstance(value, (dict, list)) else value}"
        for key, value in data.items()
    ]
    return "\n".join(lines) or "OK"


def _reminder_line(item: dict[str, Any]) -> str:
    status = "[✓]" if item.get("is_completed") else "[ ]"
    due = f" (Due: {_when(item['due_date'])})" if item.get("due_date") else ""
    line = f"{status} [ID: {item['id']}] {item['title']}{due}"
    if item.get("notes"):
        line += f"\nNotes: {item['notes']}"
    return line


def _event_block(item: dict[str, Any]) -> str:
    lines = [
        f"[{item.get('calendar_name', '')}] {item['title']}",
        f"{_when(item['start_date'])} - {_when(item['end_date'])}",
    ]
    if item.get("location"):
        lines.append(f"Location: {item['location']}")
    if item.get("description"):
        lines.append(f"Description: {item['description']}")
    return "\n".join(lines)


# ── Contacts / notes ──────────────────────────────────────────────────


def _render_contacts(data: dict[str, Any]) -> str:
    query = data.get("query")
    items = data["items"]
    with_phones = [c for c in items if c.get("phones")]
    lines = [f"{c['name']}: {', '.join(c['phones'])}" for c in with_phones]

    if query:
        if not lines:
            return (
                f'No contact found for "{query}". Try a different name '
                "or use no name parameter to list all contacts."
            )
        return "\n".join(lines)

    if not items:
        return (
            "No contacts found in the address book. "
            "Please make sure you have granted access to Contacts."
        )
    if not lines:
        return (
            "Found contacts but none have phone numbers. "
            "Try searching by name to see more details."
        )
    return f"Found {len(items)} contacts:\n\n" + "\n".join(lines)


def _render_notes(data: dict[str, Any]) -> str:
    blocks = [f"{n['name']}:\n{n.get('content', '')}" for n in data["items"]]
    if blocks:
        return "\n\n".join(blocks)
    query = data.get("query")
    return f'No notes found for "{query}"' if query else "No notes found"


# ── Messages ──────────────────────────────────────────────────────────


def _render_send(data: dict[str, Any]) -> str:
    return f"Message sent to {data['phone_number']}"


def _render_read(data: dict[str, Any]) -> str:
    if not data["items"]:
        return "No messages found"
    return "\n".join(
        f"[{_when(m['date'])}] {'Me' if m['is_from_me'] else m['sender']}: {m['content']}"
        for m in data["items"]
    )


def _render_schedule(data: dict[str, Any]) -> str:
    item = data["item"]
    return (
        f"Message scheduled to be sent to {item['phone_number']} "
        f"at {_when(item['scheduled_time'])}"
    )


def _render_unread(data: dict[str, Any]) -> str:
    items = data["items"]
    if not items:
        return "No unread messages found"
    blocks = [
        f"[{_when(m['date'])}] From {m.get('display_name') or m['sender']}:\n{m['content']}"
        for m in items
    ]
    return f"Found {len(items)} unread message(s):\n" + "\n\n".join(blocks)


# ── Reminders ─────────────────────────────────────────────────────────


def _render_reminder_list(data: dict[str, Any]) -> str:
    if not data["items"]:
        return "No reminders found"
    body = "\n\n".join(_reminder_line(r) for r in data["items"])
    return f"Found {data['count']} reminders:\n\n{body}"


def _render_reminder_find(data: dict[str, Any]) -> str:
    if not data["items"]:
        return f'No reminders found matching "{data["query"]}"'
    body = "\n\n".join(_reminder_line(r) for r in data["items"])
    return f"Found {data['count']} matching reminders:\n\n{body}"


def _render_reminder_create(data: dict[str, Any]) -> str:
    item = data["item"]
    due = f" (Due: {_when(item['due_date'])})" if item.get("due_date") else ""
    return f'Reminder created: "{item["title"]}"{due}'


def _render_reminder_complete(data: dict[str, Any]) -> str:
    return "Reminder marked as completed"


# ── Calendar ──────────────────────────────────────────────────────────


def _render_event_list(data: dict[str, Any]) -> str:
    if not data["items"]:
        return "No calendar events found"
    body = "\n\n".join(_event_block(e) for e in data["items"])
    return f"Found {data['count']} calendar events:\n\n{body}"


def _render_event_find(data: dict[str, Any]) -> str:
    if not data["items"]:
        return f'No calendar events found matching "{data["query"]}"'
    body = "\n\n".join(_event_block(e) for e in data["items"])
    return f"Found {data['count']} matching events:\n\n{body}"


def _render_event_create(data: dict[str, Any]) -> str:
    item = data["item"]
    text = (
        f'Calendar event created: "{item["title"]}"\n'
        f"{_when(item['start_date'])} - {_when(item['end_date'])}"
    )
    if item.get("location"):
        text += f"\nLocation: {item['location']}"
    return text


_OP_RENDERERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "contacts.lookup": _render_contacts,
    "notes.lookup": _render_notes,
    "messages.send": _render_send,
    "messages.read": _render_read,
    "messages.schedule": _render_schedule,
    "messages.unread": _render_unread,
    "reminders.list": _render_reminder_list,
    "reminders.find": _render_reminder_find,
    "reminders.create": _render_reminder_create,
    "reminders.complete": _render_reminder_complete,
    "calendar.list": _render_event_list,
    "calendar.find": _render_event_find,
    "calendar.create": _render_event_create,
}
