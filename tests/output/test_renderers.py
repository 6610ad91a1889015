"""Tests for the plain-text result renderers."""

from __future__ import annotations

from applemcp.output.renderers import render_text
from applemcp.services.result import ServiceError, ServiceResult


def _ok(op: str, **data) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=data)


REMINDER = {
    "id": "r1",
    "title": "Buy milk",
    "notes": "2 litres",
    "due_date": None,
    "is_completed": False,
}

EVENT = {
    "id": "e1",
    "title": "Dentist",
    "description": "",
    "start_date": "2026-03-02T10:00:00Z",
    "end_date": "2026-03-02T11:00:00Z",
    "location": "Main St",
    "calendar_name": "Home",
}


class TestErrors:
    def test_error_prefix(self) -> None:
        result = ServiceResult(
            ok=False, op="reminders", error=ServiceError(code="X", message="boom")
        )
        assert render_text(result) == "Error: boom"


class TestReminders:
    def test_list(self) -> None:
        text = render_text(_ok("reminders.list", count=1, items=[REMINDER]))
        assert text == "Found 1 reminders:\n\n[ ] [ID: r1] Buy milk\nNotes: 2 litres"

    def test_completed_marker(self) -> None:
        done = {**REMINDER, "is_completed": True, "notes": ""}
        text = render_text(_ok("reminders.list", count=1, items=[done]))
        assert "[✓] [ID: r1] Buy milk" in text

    def test_empty_find(self) -> None:
        text = render_text(_ok("reminders.find", count=0, items=[], query="zebra"))
        assert text == 'No reminders found matching "zebra"'

    def test_create_with_due(self) -> None:
        item = {**REMINDER, "due_date": "2026-03-31T09:00:00Z"}
        text = render_text(_ok("reminders.create", item=item))
        assert text.startswith('Reminder created: "Buy milk" (Due: ')

    def test_complete(self) -> None:
        assert render_text(_ok("reminders.complete", id="r1")) == "Reminder marked as completed"


class TestCalendar:
    def test_find(self) -> None:
        text = render_text(_ok("calendar.find", count=1, items=[EVENT], query="Dentist"))
        assert text.startswith("Found 1 matching events:\n\n[Home] Dentist\n")
        assert "Location: Main St" in text

    def test_empty_list(self) -> None:
        assert render_text(_ok("calendar.list", count=0, items=[])) == "No calendar events found"

    def test_create(self) -> None:
        text = render_text(_ok("calendar.create", item=EVENT))
        assert text.startswith('Calendar event created: "Dentist"\n')


class TestContactsAndNotes:
    def test_contact_search(self) -> None:
        items = [{"id": "c1", "name": "Ann", "phones": ["+1555", "+1666"]}]
        text = render_text(_ok("contacts.lookup", query="Ann", count=1, items=items))
        assert text == "Ann: +1555, +1666"

    def test_contact_search_miss(self) -> None:
        text = render_text(_ok("contacts.lookup", query="Zed", count=0, items=[]))
        assert text.startswith('No contact found for "Zed".')

    def test_contacts_without_phones(self) -> None:
        items = [{"id": "c1", "name": "Ann", "phones": []}]
        text = render_text(_ok("contacts.lookup", query=None, count=1, items=items))
        assert text.startswith("Found contacts but none have phone numbers.")

    def test_contacts_listing(self) -> None:
        items = [{"id": "c1", "name": "Ann", "phones": ["+1555"]}]
        text = render_text(_ok("contacts.lookup", query=None, count=1, items=items))
        assert text == "Found 1 contacts:\n\nAnn: +1555"

    def test_notes(self) -> None:
        items = [{"id": "n1", "name": "Groceries", "content": "Milk"}]
        text = render_text(_ok("notes.lookup", query="Milk", count=1, items=items))
        assert text == "Groceries:\nMilk"

    def test_notes_miss(self) -> None:
        text = render_text(_ok("notes.lookup", query="x", count=0, items=[]))
        assert text == 'No notes found for "x"'


class TestMessages:
    def test_send(self) -> None:
        assert render_text(_ok("messages.send", phone_number="+1555")) == "Message sent to +1555"

    def test_read_marks_own_messages(self) -> None:
        items = [
            {"content": "hey", "date": "2026-03-01T12:00:00Z", "sender": "+1555"},
            {"content": "yo", "date": "2026-03-01T12:01:00Z", "sender": "+1555"},
        ]
        items[0]["is_from_me"] = False
        items[1]["is_from_me"] = True
        lines = render_text(_ok("messages.read", items=items)).splitlines()
        assert lines[0].endswith("] +1555: hey")
        assert lines[1].endswith("] Me: yo")

    def test_unread(self) -> None:
        items = [
            {
                "content": "hi",
                "date": "2026-03-01T12:00:00Z",
                "sender": "+1555",
                "display_name": "Ann",
                "is_from_me": False,
            }
        ]
        text = render_text(_ok("messages.unread", count=1, items=items))
        assert text.startswith("Found 1 unread message(s):\n[")
        assert "From Ann:\nhi" in text

    def test_no_unread(self) -> None:
        assert render_text(_ok("messages.unread", count=0, items=[])) == "No unread messages found"

    def test_schedule(self) -> None:
        item = {
            "id": "s1",
            "phone_number": "+1555",
            "message": "x",
            "scheduled_time": "2026-03-02T10:00:00Z",
        }
        text = render_text(_ok("messages.schedule", item=item))
        assert text.startswith("Message scheduled to be sent to +1555 at ")


class TestWarningsAndFallback:
    def test_warnings_appended(self) -> None:
        result = ServiceResult(
            ok=True,
            op="reminders.list",
            data={"count": 0, "items": []},
            warnings=["Skipped unavailable collection: Work"],
        )
        assert render_text(result) == (
            "No reminders found\n\nWarning: Skipped unavailable collection: Work"
        )

    def test_unknown_op_generic(self) -> None:
        assert render_text(_ok("check", domains={"notes": None})) == 'domains: {"notes":null}'
