"""Aggregator — fan a logical operation out over every source of a domain.

Contract:
- Sources are enumerated fresh on every call and visited in the order
  the application reports them; results are concatenated in that order.
- A source that fails is logged and skipped. Only when *every* source
  fails does the call raise DomainAccessError.
- ``find`` with a text-only predicate that matches nothing is retried
  once as a full enumeration filtered case-insensitively here, because
  the applications' own query engines disagree on case and substring
  semantics. No fallback is attempted when a date range is present.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from applemcp.domain.errors import CreateFailedError, DomainAccessError, SourceUnavailableError
from applemcp.domain.matching import SearchPredicate, fallback_filter
from applemcp.domain.records import CollectionItem
from applemcp.domain.types import APP_NAMES, Domain
from applemcp.infrastructure.bridge import AutomationBridge, BridgeError
from applemcp.infrastructure.sources import CollectionSource
from applemcp.services.telemetry import trace_span

log = structlog.get_logger(__name__)


@dataclass
class Aggregation[T: CollectionItem]:
    """Merged items plus the names of the sources that were skipped."""

    items: list[T]
    skipped: list[str] = field(default_factory=list)
    fallback_used: bool = False

    @property
    def warnings(self) -> list[str]:
        return [f"Skipped unavailable collection: {name}" for name in self.skipped]


class Aggregator[T: CollectionItem]:
    """Merge reads across all collection sources of one domain."""

    def __init__(
        self,
        bridge: AutomationBridge,
        domain: Domain,
        record_cls: type[T],
    ) -> None:
        self._bridge = bridge
        self._domain = domain
        self._record_cls = record_cls

    @property
    def domain(self) -> Domain:
        return self._domain

    def sources(self) -> list[CollectionSource[T]]:
        """Acquire a fresh handle for every backing store of the domain."""
        try:
            handles = self._bridge.list_backing_stores(self._domain)
        except BridgeError as exc:
            msg = f"Cannot list {APP_NAMES[self._domain]} collections: {exc}"
            raise DomainAccessError(msg, detail={"domain": self._domain.value}) from exc
        return [CollectionSource(self._bridge, h, self._record_cls) for h in handles]

    def _all_failed(self, sources: list[CollectionSource[T]], failed: list[str]) -> bool:
        return bool(sources) and len(failed) == len(sources)

    def _domain_error(self, failed: list[str]) -> DomainAccessError:
        msg = (
            f"Cannot access any {APP_NAMES[self._domain]} collection "
            f"({len(failed)} unavailable)"
        )
        return DomainAccessError(msg, detail={"domain": self._domain.value, "sources": failed})

    def _fan_out(
        self,
        sources: list[CollectionSource[T]],
        action: str,
        call: Callable[[CollectionSource[T]], list[T]],
    ) -> tuple[list[T], list[str]]:
        items: list[T] = []
        failed: list[str] = []
        for source in sources:
            with trace_span(f"{action}:{source.name}") as span:
                try:
                    found = call(source)
                except SourceUnavailableError as exc:
                    log.warning(
                        "source.unavailable",
                        domain=self._domain.value,
                        source=source.name,
                        action=action,
                        error=exc.message,
                    )
                    failed.append(source.name)
                    continue
                if span is not None:
                    span.annotate("items", len(found))
            items.extend(found)
        return items, failed

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_all(self) -> Aggregation[T]:
        """Every item of every source."""
        sources = self.sources()
        items, failed = self._fan_out(sources, "enumerate", lambda s: s.enumerate())
        if self._all_failed(sources, failed):
            raise self._domain_error(failed)
        return Aggregation(items, failed)

    def find(self, predicate: SearchPredicate) -> Aggregation[T]:
        """Strict search, then a single case-insensitive fallback when empty."""
        sources = self.sources()
        items, failed = self._fan_out(sources, "search", lambda s: s.search(predicate))
        strict_failed = self._all_failed(sources, failed)

        if items or not predicate.is_text_only:
            if strict_failed:
                raise self._domain_error(failed)
            return Aggregation(items, failed)

        assert predicate.text is not None
        log.info(
            "search.fallback",
            domain=self._domain.value,
            text=predicate.text,
            sources=len(sources),
        )
        everything, fallback_failed = self._fan_out(
            sources, "fallback", lambda s: s.enumerate()
        )
        if strict_failed and self._all_failed(sources, fallback_failed):
            raise self._domain_error(fallback_failed)

        matched = fallback_filter(everything, predicate.text, self._record_cls.fallback_fields)
        return Aggregation(matched, fallback_failed, fallback_used=True)

    def create(self, record: dict[str, Any]) -> T:
        """Insert *record* into the default source (or the first one)."""
        sources = self.sources()
        if not sources:
            msg = f"No {APP_NAMES[self._domain]} collection available to create in"
            raise CreateFailedError(msg)
        target = next((s for s in sources if s.is_default), sources[0])
        with trace_span(f"create:{target.name}"):
            return target.create(record)

    def mutate_first(self, item_id: str, field_name: str, value: Any) -> bool:
        """Set a field on the first source that holds *item_id*.

        Returns False when no reachable source has the id.
        """
        sources = self.sources()
        failed: list[str] = []
        for source in sources:
            try:
                if source.mutate(item_id, field_name, value):
                    return True
            except SourceUnavailableError as exc:
                log.warning(
                    "source.unavailable",
                    domain=self._domain.value,
                    source=source.name,
                    action="mutate",
                    error=exc.message,
                )
                failed.append(source.name)
        if self._all_failed(sources, failed):
            raise self._domain_error(failed)
        return False
