"""CollectionSource — one enumerable backing store of a domain.

A source wraps a :class:`StoreHandle` and the bridge that can reach it,
and turns raw bridge rows into typed records. Any failure of the store
(bridge error or malformed row) surfaces as SourceUnavailableError so
the aggregator can skip it without aborting the whole request.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from applemcp.domain.errors import CreateFailedError, SourceUnavailableError
from applemcp.domain.matching import SearchPredicate, contains_text
from applemcp.domain.records import CollectionItem
from applemcp.domain.types import Domain
from applemcp.infrastructure.bridge import AutomationBridge, BridgeError, StoreHandle


class CollectionSource[T: CollectionItem]:
    """Typed, failure-isolated view over one backing store."""

    def __init__(
        self,
        bridge: AutomationBridge,
        handle: StoreHandle,
        record_cls: type[T],
    ) -> None:
        self._bridge = bridge
        self._handle = handle
        self._record_cls = record_cls

    def __repr__(self) -> str:
        return f"CollectionSource({self._handle.domain.value}:{self._handle.name!r})"

    @property
    def name(self) -> str:
        return self._handle.name

    @property
    def is_default(self) -> bool:
        return self._handle.is_default

    @contextmanager
    def _guard(self, action: str) -> Generator[None]:
        try:
            yield
        except (BridgeError, ValidationError) as exc:
            msg = f"{action} failed on {self.name}: {exc}"
            raise SourceUnavailableError(self.name, msg) from exc

    def _parse(self, rows: list[dict[str, Any]]) -> list[T]:
        return [self._record_cls.model_validate(row) for row in rows]

    def enumerate(self) -> list[T]:
        """Every item in the store."""
        with self._guard("enumerate"):
            return self._parse(self._bridge.read_all(self._handle))

    def search(self, predicate: SearchPredicate) -> list[T]:
        """Items matching *predicate*.

        Calendars cannot combine date and text criteria natively, so for
        them the store is narrowed by date range first and the exact text
        match is applied here.
        """
        with self._guard("search"):
            if self._handle.domain is not Domain.CALENDAR:
                return self._parse(self._bridge.search_by_predicate(self._handle, predicate))

            if predicate.has_date_range:
                date_only = predicate.model_copy(update={"text": None})
                rows = self._bridge.search_by_predicate(self._handle, date_only)
            else:
                rows = self._bridge.read_all(self._handle)
            items = self._parse(rows)

        if predicate.text:
            items = [i for i in items if contains_text(i, predicate.text, predicate.fields)]
        return items

    def create(self, record: dict[str, Any]) -> T:
        """Insert *record* and return the stored item."""
        try:
            return self._record_cls.model_validate(self._bridge.insert(self._handle, record))
        except (BridgeError, ValidationError) as exc:
            msg = f"Could not create item in {self.name}: {exc}"
            raise CreateFailedError(msg, detail={"source": self.name}) from exc

    def mutate(self, item_id: str, field: str, value: Any) -> bool:
        """Set *field* on the item *item_id*; False when the id is not here."""
        with self._guard("mutate"):
            return self._bridge.set_field(self._handle, item_id, field, value)
