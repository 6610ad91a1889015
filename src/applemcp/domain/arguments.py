"""Per-operation argument records.

One strict, frozen model per (domain, operation) pair. The table at the
bottom is the closed set of accepted shapes; the router looks a model up
by its tag before touching any field of the raw request.

Field names are snake_case in Python and camelCase on the wire
(``searchText``, ``phoneNumber``, ``dueDate`` ...). Unknown keys,
including ``operation`` itself, are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from applemcp.domain.timestamps import parse_iso
from applemcp.domain.types import LOOKUP, Domain

RequiredText = Annotated[str, Field(min_length=1)]
Timestamp = Annotated[datetime, BeforeValidator(parse_iso)]
Limit = Annotated[int, Field(ge=1)]
# Longest event accepted: one year.
MAX_DURATION_MINUTES = 366 * 24 * 60
Minutes = Annotated[float, Field(ge=0, le=MAX_DURATION_MINUTES, allow_inf_nan=False)]


class ArgumentSet(BaseModel):
    """Base for every validated argument record."""

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# --- contacts / notes ---


class ContactsLookupArgs(ArgumentSet):
    name: str | None = None


class NotesLookupArgs(ArgumentSet):
    search_text: str | None = None


# --- messages ---


class MessageSendArgs(ArgumentSet):
    phone_number: RequiredText
    message: RequiredText


class MessageReadArgs(ArgumentSet):
    phone_number: RequiredText
    limit: Limit | None = None


class MessageScheduleArgs(ArgumentSet):
    phone_number: RequiredText
    message: RequiredText
    scheduled_time: Timestamp


class MessageUnreadArgs(ArgumentSet):
    limit: Limit | None = None


# --- reminders ---


class ReminderListArgs(ArgumentSet):
    pass


class ReminderFindArgs(ArgumentSet):
    search_text: RequiredText


class ReminderCreateArgs(ArgumentSet):
    title: RequiredText
    notes: str | None = None
    due_date: Timestamp | None = None


class ReminderCompleteArgs(ArgumentSet):
    id: RequiredText


# --- calendar ---


class CalendarListArgs(ArgumentSet):
    pass


class CalendarFindArgs(ArgumentSet):
    search_text: RequiredText
    start_date: Timestamp | None = None
    end_date: Timestamp | None = None

    @model_validator(mode="after")
    def _ordered_range(self) -> CalendarFindArgs:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            msg = "'endDate' must not be earlier than 'startDate'"
            raise ValueError(msg)
        return self


class CalendarCreateArgs(ArgumentSet):
    title: RequiredText
    start_date: Timestamp
    duration: Minutes
    description: str | None = None
    location: str | None = None


ARGUMENT_MODELS: dict[tuple[Domain, str], type[ArgumentSet]] = {
    (Domain.CONTACTS, LOOKUP): ContactsLookupArgs,
    (Domain.NOTES, LOOKUP): NotesLookupArgs,
    (Domain.MESSAGES, "send"): MessageSendArgs,
    (Domain.MESSAGES, "read"): MessageReadArgs,
    (Domain.MESSAGES, "schedule"): MessageScheduleArgs,
    (Domain.MESSAGES, "unread"): MessageUnreadArgs,
    (Domain.REMINDERS, "list"): ReminderListArgs,
    (Domain.REMINDERS, "find"): ReminderFindArgs,
    (Domain.REMINDERS, "create"): ReminderCreateArgs,
    (Domain.REMINDERS, "complete"): ReminderCompleteArgs,
    (Domain.CALENDAR, "list"): CalendarListArgs,
    (Domain.CALENDAR, "find"): CalendarFindArgs,
    (Domain.CALENDAR, "create"): CalendarCreateArgs,
}
