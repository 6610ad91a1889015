"""RemindersService — list, find, create and complete reminders.

Reminders are spread over several lists; reads go through the
aggregator so one unreadable list never hides the others. New reminders
land in the default list.
"""

from __future__ import annotations

from applemcp.domain.arguments import (
    ReminderCompleteArgs,
    ReminderCreateArgs,
    ReminderFindArgs,
    ReminderListArgs,
)
from applemcp.domain.errors import MutateFailedError
from applemcp.domain.matching import SearchPredicate
from applemcp.domain.records import Reminder
from applemcp.domain.types import Domain
from applemcp.services.aggregator import Aggregation
from applemcp.services.base import BaseService
from applemcp.services.result import ServiceResult
from applemcp.services.telemetry import traced


def _listing(op: str, found: Aggregation[Reminder], query: str | None = None) -> ServiceResult:
    data = {
        "count": len(found.items),
        "items": [r.model_dump(mode="json") for r in found.items],
    }
    if query is not None:
        data["query"] = query
        data["fallback"] = found.fallback_used
    return ServiceResult(ok=True, op=op, data=data, warnings=found.warnings)


class RemindersService(BaseService):
    domain = Domain.REMINDERS

    @traced
    def list(self, args: ReminderListArgs) -> ServiceResult:
        return _listing("reminders.list", self._open(Reminder).list_all())

    @traced
    def find(self, args: ReminderFindArgs) -> ServiceResult:
        predicate = SearchPredicate(text=args.search_text, fields=Reminder.search_fields)
        found = self._open(Reminder).find(predicate)
        return _listing("reminders.find", found, query=args.search_text)

    @traced
    def create(self, args: ReminderCreateArgs) -> ServiceResult:
        record = {
            "title": args.title,
            "notes": args.notes or "",
            "due_date": args.due_date,
        }
        reminder = self._open(Reminder).create(record)
        return ServiceResult(
            ok=True,
            op="reminders.create",
            data={"item": reminder.model_dump(mode="json")},
        )

    @traced
    def complete(self, args: ReminderCompleteArgs) -> ServiceResult:
        """Mark a reminder completed; completing it again is a no-op success."""
        if not self._open(Reminder).mutate_first(args.id, "is_completed", True):
            msg = f"Failed to complete reminder. ID {args.id} not found."
            raise MutateFailedError(msg, detail={"id": args.id})
        return ServiceResult(ok=True, op="reminders.complete", data={"id": args.id})
