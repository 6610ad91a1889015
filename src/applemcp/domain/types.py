"""Domains and their operation sets.

The five tools map one-to-one onto the five domains. Contacts and notes
expose a single implicit ``lookup`` operation; the other domains select
their operation through the ``operation`` argument.
"""

from __future__ import annotations

from enum import StrEnum


class Domain(StrEnum):
    """Backing application categories exposed as tools."""

    CONTACTS = "contacts"
    NOTES = "notes"
    MESSAGES = "messages"
    REMINDERS = "reminders"
    CALENDAR = "calendar"


LOOKUP = "lookup"

OPERATIONS: dict[Domain, tuple[str, ...]] = {
    Domain.CONTACTS: (LOOKUP,),
    Domain.NOTES: (LOOKUP,),
    Domain.MESSAGES: ("send", "read", "schedule", "unread"),
    Domain.REMINDERS: ("list", "find", "create", "complete"),
    Domain.CALENDAR: ("list", "find", "create"),
}

# Domains whose tool takes no ``operation`` argument.
IMPLICIT_OPERATION: dict[Domain, str] = {
    Domain.CONTACTS: LOOKUP,
    Domain.NOTES: LOOKUP,
}

# Application names as shown to the user in remediation messages.
APP_NAMES: dict[Domain, str] = {
    Domain.CONTACTS: "Contacts",
    Domain.NOTES: "Notes",
    Domain.MESSAGES: "Messages",
    Domain.REMINDERS: "Reminders",
    Domain.CALENDAR: "Calendar",
}

# The privacy pane a user must enable for each domain.
PRIVACY_SETTINGS: dict[Domain, str] = {
    Domain.CONTACTS: "System Settings > Privacy & Security > Contacts",
    Domain.NOTES: "System Settings > Privacy & Security > Automation > Notes",
    Domain.MESSAGES: "System Settings > Privacy & Security > Full Disk Access",
    Domain.REMINDERS: "System Settings > Privacy & Security > Reminders",
    Domain.CALENDAR: "System Settings > Privacy & Security > Calendars",
}


def parse_domain(name: str) -> Domain | None:
    """Return the Domain for a tool name, or None when the name is unknown."""
    try:
        return Domain(name)
    except ValueError:
        return None
