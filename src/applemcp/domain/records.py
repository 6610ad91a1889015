"""Collection item records returned by the backing applications.

Records are frozen and read-through: every request re-reads them from
the application, so nothing here is ever cached or mutated in place.
Each record's ``id`` is unique only within its own collection source.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator

from applemcp.domain.timestamps import ensure_aware


class CollectionItem(BaseModel):
    """Base for every domain record.

    ``search_fields`` names the text fields a strict search matches on;
    ``fallback_fields`` names the fields the broadened fallback scans.
    """

    model_config = {"frozen": True}

    search_fields: ClassVar[tuple[str, ...]] = ()
    fallback_fields: ClassVar[tuple[str, ...]] = ()

    id: str


class Reminder(CollectionItem):
    search_fields: ClassVar[tuple[str, ...]] = ("title", "notes")
    fallback_fields: ClassVar[tuple[str, ...]] = ("title", "notes")

    title: str
    notes: str = ""
    due_date: datetime | None = None
    is_completed: bool = False
    list_name: str | None = None

    @field_validator("due_date")
    @classmethod
    def _aware_due(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class CalendarEvent(CollectionItem):
    search_fields: ClassVar[tuple[str, ...]] = ("title", "description", "location")
    fallback_fields: ClassVar[tuple[str, ...]] = ("title", "description", "location")

    title: str
    description: str = ""
    start_date: datetime
    end_date: datetime
    location: str = ""
    calendar_name: str = ""

    @field_validator("start_date", "end_date")
    @classmethod
    def _aware_dates(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class Contact(CollectionItem):
    search_fields: ClassVar[tuple[str, ...]] = ("name",)
    fallback_fields: ClassVar[tuple[str, ...]] = ("name",)

    name: str
    phones: list[str] = Field(default_factory=list)


class Note(CollectionItem):
    search_fields: ClassVar[tuple[str, ...]] = ("name", "content")
    fallback_fields: ClassVar[tuple[str, ...]] = ("name", "content")

    name: str
    content: str = ""
    folder: str | None = None


class MessageRecord(CollectionItem):
    """One row of the Messages database."""

    content: str
    date: datetime
    sender: str
    is_from_me: bool = False
    display_name: str | None = None

    @field_validator("date")
    @classmethod
    def _aware_date(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class ScheduledMessage(BaseModel):
    """A message queued for delivery by the in-process scheduler."""

    model_config = {"frozen": True}

    id: str
    phone_number: str
    message: str
    scheduled_time: datetime
