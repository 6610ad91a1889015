"""ContactsService — look up people and phone numbers in Contacts."""

from __future__ import annotations

import re

from applemcp.domain.arguments import ContactsLookupArgs
from applemcp.domain.matching import SearchPredicate
from applemcp.domain.records import Contact
from applemcp.domain.types import Domain
from applemcp.services.base import BaseService
from applemcp.services.result import ServiceResult
from applemcp.services.telemetry import traced


def phone_key(number: str) -> str:
    """Comparable form of a phone number: its last ten digits."""
    return re.sub(r"\D", "", number)[-10:]


class ContactsService(BaseService):
    """Lookup by partial name or full listing, plus the phone directory."""

    domain = Domain.CONTACTS

    @traced
    def lookup(self, args: ContactsLookupArgs) -> ServiceResult:
        contacts = self._open(Contact)
        if args.name:
            found = contacts.find(SearchPredicate(text=args.name, fields=Contact.search_fields))
        else:
            found = contacts.list_all()
        return ServiceResult(
            ok=True,
            op="contacts.lookup",
            data={
                "query": args.name,
                "count": len(found.items),
                "items": [c.model_dump(mode="json") for c in found.items],
            },
            warnings=found.warnings,
        )

    def phone_directory(self) -> dict[str, str]:
        """Map of :func:`phone_key` to contact name; first contact wins."""
        directory: dict[str, str] = {}
        for contact in self._open(Contact).list_all().items:
            for phone in contact.phones:
                key = phone_key(phone)
                if key:
                    directory.setdefault(key, contact.name)
        return directory
