"""NotesService — search and list notes in Notes."""

from __future__ import annotations

from applemcp.domain.arguments import NotesLookupArgs
from applemcp.domain.matching import SearchPredicate
from applemcp.domain.records import Note
from applemcp.domain.types import Domain
from applemcp.services.base import BaseService
from applemcp.services.result import ServiceResult
from applemcp.services.telemetry import traced


class NotesService(BaseService):
    domain = Domain.NOTES

    @traced
    def lookup(self, args: NotesLookupArgs) -> ServiceResult:
        notes = self._open(Note)
        if args.search_text:
            found = notes.find(SearchPredicate(text=args.search_text, fields=Note.search_fields))
        else:
            found = notes.list_all()
        return ServiceResult(
            ok=True,
            op="notes.lookup",
            data={
                "query": args.search_text,
                "count": len(found.items),
                "items": [n.model_dump(mode="json") for n in found.items],
            },
            warnings=found.warnings,
        )
