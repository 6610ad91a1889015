"""Shared pytest fixtures for applemcp tests.

``FakeBridge`` stands in for the native applications: backing stores
are plain lists of row dicts, every call is recorded, and individual
domains or stores can be made to fail.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any

import pytest
from click.testing import CliRunner

from applemcp.domain.matching import SearchPredicate, overlaps_range
from applemcp.domain.timestamps import parse_iso
from applemcp.domain.types import Domain
from applemcp.infrastructure.bridge import BridgeError, StoreHandle
from applemcp.mcp.dispatcher import RequestDispatcher
from applemcp.services.base import ToolContext
from applemcp.services.scheduler import MessageScheduler

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class FakeBridge:
    """In-memory AutomationBridge."""

    def __init__(self) -> None:
        self.handles: dict[Domain, list[StoreHandle]] = {d: [] for d in Domain}
        self.rows: dict[str, list[dict[str, Any]]] = {}
        self.denied: set[Domain] = set()
        self.unlistable: set[Domain] = set()
        self.broken: set[str] = set()
        self.fail_send = False
        self.calls: list[tuple[Any, ...]] = []
        self.sent: list[tuple[str, str]] = []
        self.conversation: list[dict[str, Any]] = []
        self.inbox: list[dict[str, Any]] = []
        self.fail_messages = False
        self._next_id = 0

    # -- setup helpers --------------------------------------------------

    def add_store(
        self,
        domain: Domain,
        name: str,
        items: list[dict[str, Any]] | None = None,
        *,
        is_default: bool = False,
    ) -> StoreHandle:
        handle = StoreHandle(
            domain=domain, key=f"{domain.value}:{name}", name=name, is_default=is_default
        )
        self.handles[domain].append(handle)
        self.rows[handle.key] = [dict(row) for row in items or []]
        return handle

    def break_store(self, name: str) -> None:
        self.broken.add(name)

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]

    def _check(self, handle: StoreHandle) -> list[dict[str, Any]]:
        if handle.name in self.broken:
            msg = f"{handle.name} is unavailable"
            raise BridgeError(msg)
        return self.rows[handle.key]

    # -- AutomationBridge -----------------------------------------------

    def probe(self, domain: Domain) -> None:
        self.calls.append(("probe", domain))
        if domain in self.denied:
            msg = f"Not authorized to send Apple events to {domain.value}"
            raise BridgeError(msg)

    def list_backing_stores(self, domain: Domain) -> list[StoreHandle]:
        self.calls.append(("list_backing_stores", domain))
        if domain in self.unlistable:
            msg = "stores unavailable"
            raise BridgeError(msg)
        return list(self.handles[domain])

    def read_all(self, handle: StoreHandle) -> list[dict[str, Any]]:
        self.calls.append(("read_all", handle.name))
        return [dict(row) for row in self._check(handle)]

    def search_by_predicate(
        self, handle: StoreHandle, predicate: SearchPredicate
    ) -> list[dict[str, Any]]:
        self.calls.append(("search_by_predicate", handle.name, predicate))
        found = []
        for row in self._check(handle):
            if predicate.text and not any(
                predicate.text in str(row.get(f) or "") for f in predicate.fields
            ):
                continue
            if predicate.has_date_range and not overlaps_range(
                parse_iso(row["start_date"]),
                parse_iso(row["end_date"]),
                predicate.start,
                predicate.end,
            ):
                continue
            found.append(dict(row))
        return found

    def insert(self, handle: StoreHandle, record: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert", handle.name, record))
        rows = self._check(handle)
        self._next_id += 1
        row = {"id": f"new-{self._next_id}", **record}
        if handle.domain is Domain.REMINDERS:
            row.setdefault("is_completed", False)
            row["list_name"] = handle.name
        if handle.domain is Domain.CALENDAR:
            row["calendar_name"] = handle.name
        rows.append(row)
        return dict(row)

    def set_field(self, handle: StoreHandle, item_id: str, field: str, value: Any) -> bool:
        self.calls.append(("set_field", handle.name, item_id, field, value))
        for row in self._check(handle):
            if row["id"] == item_id:
                row[field] = value
                return True
        return False

    def send_message(self, phone_number: str, text: str) -> None:
        self.calls.append(("send_message", phone_number, text))
        if self.fail_send:
            msg = "Messages refused to send"
            raise BridgeError(msg)
        self.sent.append((phone_number, text))

    def read_messages(self, phone_number: str, limit: int) -> list[dict[str, Any]]:
        self.calls.append(("read_messages", phone_number, limit))
        if self.fail_messages:
            msg = "unable to open database file"
            raise BridgeError(msg)
        return [dict(m) for m in self.conversation[-limit:]]

    def unread_messages(self, limit: int) -> list[dict[str, Any]]:
        self.calls.append(("unread_messages", limit))
        if self.fail_messages:
            msg = "unable to open database file"
            raise BridgeError(msg)
        return [dict(m) for m in self.inbox[:limit]]


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def reminder_row(id_: str, title: str, **extra: Any) -> dict[str, Any]:
    return {"id": id_, "title": title, "notes": "", "is_completed": False, **extra}


def event_row(id_: str, title: str, start: str, end: str, **extra: Any) -> dict[str, Any]:
    return {"id": id_, "title": title, "start_date": start, "end_date": end, **extra}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def now() -> datetime:
    """The instant the scheduler clock is pinned to."""
    return NOW


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def ctx(bridge: FakeBridge) -> Generator[ToolContext]:
    """ToolContext over the fake bridge with a clock pinned to NOW."""
    context = ToolContext(bridge=bridge, scheduler=MessageScheduler(clock=lambda: NOW))
    try:
        yield context
    finally:
        context.scheduler.cancel_all()


@pytest.fixture
def dispatcher(ctx: ToolContext) -> RequestDispatcher:
    return RequestDispatcher(ctx)


@pytest.fixture
def make_reminder() -> Any:
    return reminder_row


@pytest.fixture
def make_event() -> Any:
    return event_row


@pytest.fixture
def reminders_bridge(bridge: FakeBridge) -> FakeBridge:
    """Two reminder lists; ``Work`` is the default."""
    bridge.add_store(
        Domain.REMINDERS,
        "Personal",
        [
            reminder_row("p1", "Buy milk", notes="2 litres"),
            reminder_row("p2", "Call mom", due_date="2026-03-03T18:00:00+00:00"),
        ],
    )
    bridge.add_store(
        Domain.REMINDERS,
        "Work",
        [reminder_row("w1", "File expenses", notes="Milk receipts too")],
        is_default=True,
    )
    return bridge


@pytest.fixture
def calendar_bridge(bridge: FakeBridge) -> FakeBridge:
    """Two calendars with events spread over early March 2026."""
    bridge.add_store(
        Domain.CALENDAR,
        "Home",
        [
            event_row(
                "h1",
                "Dentist",
                "2026-03-02T10:00:00+00:00",
                "2026-03-02T11:00:00+00:00",
                location="Main St",
            ),
            event_row(
                "h2",
                "Team dinner",
                "2026-03-05T19:00:00+00:00",
                "2026-03-05T21:00:00+00:00",
            ),
        ],
        is_default=True,
    )
    bridge.add_store(
        Domain.CALENDAR,
        "Work",
        [
            event_row(
                "w1",
                "Team standup",
                "2026-03-02T09:00:00+00:00",
                "2026-03-02T09:15:00+00:00",
                description="Daily sync",
            ),
        ],
    )
    return bridge
