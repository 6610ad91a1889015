"""Automation bridge contract.

The bridge is the only thing that talks to the native applications.
Collection sources and the capability gate depend on this protocol,
never on a concrete implementation, so tests swap in an in-memory
bridge and the server wires in :class:`OsascriptBridge`.

Every method raises :class:`BridgeError` when the underlying call
fails. Records travel as plain dicts keyed by the record field names
in :mod:`applemcp.domain.records`.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel

from applemcp.domain.matching import SearchPredicate
from applemcp.domain.types import Domain


class BridgeError(Exception):
    """An automation call into a native application failed."""


class StoreHandle(BaseModel):
    """Opaque reference to one backing store (a list, a calendar, a folder).

    Handles are acquired per request and dropped when it finishes.
    """

    model_config = {"frozen": True}

    domain: Domain
    key: str
    name: str
    is_default: bool = False


class AutomationBridge(Protocol):
    """Capability interface consumed by the core."""

    def probe(self, domain: Domain) -> None: ...

    def list_backing_stores(self, domain: Domain) -> list[StoreHandle]: ...

    def read_all(self, handle: StoreHandle) -> list[dict[str, Any]]: ...

    def search_by_predicate(
        self, handle: StoreHandle, predicate: SearchPredicate
    ) -> list[dict[str, Any]]: ...

    def insert(self, handle: StoreHandle, record: dict[str, Any]) -> dict[str, Any]: ...

    def set_field(self, handle: StoreHandle, item_id: str, field: str, value: Any) -> bool: ...

    def send_message(self, phone_number: str, text: str) -> None: ...

    def read_messages(self, phone_number: str, limit: int) -> list[dict[str, Any]]: ...

    def unread_messages(self, limit: int) -> list[dict[str, Any]]: ...
