"""CalendarService — list, find and create calendar events.

``find`` narrows every calendar by the optional date range first and
matches text afterwards; when no date range is given and nothing
matches exactly, the aggregator's case-insensitive fallback applies.
"""

from __future__ import annotations

from datetime import timedelta

from applemcp.domain.arguments import CalendarCreateArgs, CalendarFindArgs, CalendarListArgs
from applemcp.domain.errors import ArgumentValidationError
from applemcp.domain.matching import SearchPredicate
from applemcp.domain.records import CalendarEvent
from applemcp.domain.types import Domain
from applemcp.services.base import BaseService
from applemcp.services.result import ServiceResult
from applemcp.services.telemetry import traced


class CalendarService(BaseService):
    domain = Domain.CALENDAR

    @traced
    def list(self, args: CalendarListArgs) -> ServiceResult:
        found = self._open(CalendarEvent).list_all()
        return ServiceResult(
            ok=True,
            op="calendar.list",
            data={
                "count": len(found.items),
                "items": [e.model_dump(mode="json") for e in found.items],
            },
            warnings=found.warnings,
        )

    @traced
    def find(self, args: CalendarFindArgs) -> ServiceResult:
        predicate = SearchPredicate(
            text=args.search_text,
            fields=CalendarEvent.search_fields,
            start=args.start_date,
            end=args.end_date,
        )
        found = self._open(CalendarEvent).find(predicate)
        return ServiceResult(
            ok=True,
            op="calendar.find",
            data={
                "query": args.search_text,
                "fallback": found.fallback_used,
                "count": len(found.items),
                "items": [e.model_dump(mode="json") for e in found.items],
            },
            warnings=found.warnings,
        )

    @traced
    def create(self, args: CalendarCreateArgs) -> ServiceResult:
        try:
            end = args.start_date + timedelta(minutes=args.duration)
        except OverflowError:
            msg = "Invalid arguments for calendar.create: 'duration' ends the event past year 9999"
            raise ArgumentValidationError(msg, field="duration") from None
        record = {
            "title": args.title,
            "description": args.description or "",
            "location": args.location or "",
            "start_date": args.start_date,
            "end_date": end,
        }
        event = self._open(CalendarEvent).create(record)
        return ServiceResult(
            ok=True,
            op="calendar.create",
            data={"item": event.model_dump(mode="json")},
        )
