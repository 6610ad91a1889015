"""OsascriptBridge — the production automation bridge.

Contacts, Notes, Reminders and Calendar are driven through a single
JavaScript for Automation (JXA) program run by ``osascript``. Each call
passes one JSON request as the program's only argument and reads one
JSON document back from stdout. Messages are sent with AppleScript and
read from the Messages database (see :mod:`applemcp.infrastructure.chatdb`).

Every failure (non-zero exit, timeout, unparsable output) is raised as
:class:`BridgeError`.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from applemcp.domain.matching import SearchPredicate
from applemcp.domain.types import Domain
from applemcp.infrastructure.bridge import BridgeError, StoreHandle
from applemcp.infrastructure.chatdb import ChatDatabase

logger = logging.getLogger(__name__)

# Record field -> native scripting property, per domain.
NATIVE_FIELDS: dict[Domain, dict[str, str]] = {
    Domain.CONTACTS: {"name": "name"},
    Domain.NOTES: {"name": "name", "content": "plaintext"},
    Domain.REMINDERS: {"title": "name", "notes": "body", "is_completed": "completed"},
    Domain.CALENDAR: {
        "title": "summary",
        "description": "description",
        "location": "location",
    },
}

JXA_PROGRAM = r"""
function iso(d) { return d ? d.toISOString() : null; }

function textClause(req) {
  if (!req.text || !req.fields.length) return null;
  const parts = req.fields.map(f => ({ [f]: { _contains: req.text } }));
  return parts.length === 1 ? parts[0] : { _or: parts };
}

function rangeClause(req) {
  const parts = [];
  if (req.start) parts.push({ endDate: { _greaterThanEquals: new Date(req.start) } });
  if (req.end) parts.push({ startDate: { _lessThanEquals: new Date(req.end) } });
  if (!parts.length) return null;
  return parts.length === 1 ? parts[0] : { _and: parts };
}

const DOMAINS = {
  contacts: {
    app: () => Application('Contacts'),
    probe: app => app.people.length,
    stores: app => [{ key: 'default', name: 'Contacts', is_default: true }],
    store: (app, key) => app,
    items: store => store.people,
    ser: (p, store) => ({
      id: p.id(), name: p.name(), phones: p.phones().map(ph => ph.value())
    }),
  },
  notes: {
    app: () => Application('Notes'),
    probe: app => app.notes.length,
    stores: app => app.folders().map(f => ({ key: f.id(), name: f.name(), is_default: false })),
    store: (app, key) => app.folders.byId(key),
    items: store => store.notes,
    ser: (n, store) => ({
      id: n.id(), name: n.name(), content: n.plaintext() || '', folder: store.name()
    }),
  },
  reminders: {
    app: () => Application('Reminders'),
    probe: app => app.reminders.length,
    stores: app => {
      const def = app.defaultList().id();
      return app.lists().map(l => ({ key: l.id(), name: l.name(), is_default: l.id() === def }));
    },
    store: (app, key) => app.lists.byId(key),
    items: store => store.reminders,
    ser: (r, store) => ({
      id: r.id(), title: r.name(), notes: r.body() || '', due_date: iso(r.dueDate()),
      is_completed: r.completed(), list_name: store.name()
    }),
    make: (app, rec) => {
      const props = { name: rec.title, body: rec.notes || '' };
      if (rec.due_date) props.dueDate = new Date(rec.due_date);
      return app.Reminder(props);
    },
  },
  calendar: {
    app: () => Application('Calendar'),
    probe: app => app.calendars.length,
    stores: app => {
      let def = null;
      try { def = app.defaultCalendar().name(); } catch (e) {}
      return app.calendars().map(c => ({ key: c.name(), name: c.name(), is_default: c.name() === def }));
    },
    store: (app, key) => app.calendars.byName(key),
    items: store => store.events,
    ser: (e, store) => ({
      id: e.id(), title: e.summary(), description: e.description() || '',
      start_date: iso(e.startDate()), end_date: iso(e.endDate()),
      location: e.location() || '', calendar_name: store.name()
    }),
    make: (app, rec) => app.Event({
      summary: rec.title, description: rec.description || '', location: rec.location || '',
      startDate: new Date(rec.start_date), endDate: new Date(rec.end_date)
    }),
  },
};

function run(argv) {
  const req = JSON.parse(argv[0]);
  const spec = DOMAINS[req.domain];
  const app = spec.app();
  switch (req.action) {
    case 'probe':
      return JSON.stringify(spec.probe(app));
    case 'stores':
      return JSON.stringify(spec.stores(app));
    case 'read': {
      const store = spec.store(app, req.key);
      return JSON.stringify(spec.items(store)().map(i => spec.ser(i, store)));
    }
    case 'search': {
      const store = spec.store(app, req.key);
      const clause = req.domain === 'calendar' ? rangeClause(req) : textClause(req);
      const coll = spec.items(store);
      const found = clause ? coll.whose(clause)() : coll();
      return JSON.stringify(found.map(i => spec.ser(i, store)));
    }
    case 'insert': {
      const store = spec.store(app, req.key);
      const obj = spec.make(app, req.record);
      spec.items(store).push(obj);
      return JSON.stringify(spec.ser(obj, store));
    }
    case 'set': {
      const store = spec.store(app, req.key);
      const matches = spec.items(store).whose({ id: req.id })();
      if (!matches.length) return 'false';
      matches[0][req.field] = req.value;
      return 'true';
    }
  }
  throw new Error('unknown action ' + req.action);
}
"""

SEND_MESSAGE_SCRIPT = """
on run argv
    set targetNumber to item 1 of argv
    set messageText to item 2 of argv
    tell application "Messages"
        set targetService to 1st account whose service type = iMessage
        set targetBuddy to participant targetNumber of targetService
        send messageText to targetBuddy
    end tell
end run
"""


class OsascriptBridge:
    """Drive the native applications through ``osascript``."""

    def __init__(
        self,
        *,
        osascript_path: str = "/usr/bin/osascript",
        timeout: float = 30.0,
        chat_db: Path | None = None,
    ) -> None:
        self._osascript = osascript_path
        self._timeout = timeout
        self._chat_db = ChatDatabase(chat_db or Path("~/Library/Messages/chat.db"))

    # ------------------------------------------------------------------
    # Process plumbing
    # ------------------------------------------------------------------

    def _run(self, args: list[str]) -> str:
        try:
            result = subprocess.run(
                [self._osascript, *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            msg = f"osascript timed out after {self._timeout}s"
            raise BridgeError(msg) from exc
        except OSError as exc:
            msg = f"Cannot run osascript: {exc}"
            raise BridgeError(msg) from exc
        if result.returncode != 0:
            msg = result.stderr.strip() or f"osascript exited with code {result.returncode}"
            raise BridgeError(msg)
        return result.stdout.strip()

    def _jxa(self, request: dict[str, Any]) -> Any:
        logger.debug("jxa %s %s", request.get("domain"), request.get("action"))
        out = self._run(["-l", "JavaScript", "-e", JXA_PROGRAM, json.dumps(request)])
        try:
            return json.loads(out)
        except json.JSONDecodeError as exc:
            msg = f"Unparsable response from {request.get('domain')}: {out[:200]!r}"
            raise BridgeError(msg) from exc

    @staticmethod
    def _native(domain: Domain, field: str) -> str:
        return NATIVE_FIELDS.get(domain, {}).get(field, field)

    # ------------------------------------------------------------------
    # Collection domains
    # ------------------------------------------------------------------

    def probe(self, domain: Domain) -> None:
        if domain is Domain.MESSAGES:
            self._chat_db.probe()
            return
        self._jxa({"domain": domain.value, "action": "probe"})

    def list_backing_stores(self, domain: Domain) -> list[StoreHandle]:
        rows = self._jxa({"domain": domain.value, "action": "stores"})
        return [StoreHandle(domain=domain, **row) for row in rows]

    def read_all(self, handle: StoreHandle) -> list[dict[str, Any]]:
        return list(self._jxa({"domain": handle.domain.value, "action": "read", "key": handle.key}))

    def search_by_predicate(
        self, handle: StoreHandle, predicate: SearchPredicate
    ) -> list[dict[str, Any]]:
        request: dict[str, Any] = {
            "domain": handle.domain.value,
            "action": "search",
            "key": handle.key,
            "text": predicate.text,
            "fields": [self._native(handle.domain, f) for f in predicate.fields],
            "start": predicate.start.isoformat() if predicate.start else None,
            "end": predicate.end.isoformat() if predicate.end else None,
        }
        return list(self._jxa(request))

    def insert(self, handle: StoreHandle, record: dict[str, Any]) -> dict[str, Any]:
        payload = {k: v.isoformat() if hasattr(v, "isoformat") else v for k, v in record.items()}
        created = self._jxa(
            {
                "domain": handle.domain.value,
                "action": "insert",
                "key": handle.key,
                "record": payload,
            }
        )
        if not isinstance(created, dict):
            msg = f"Unexpected insert response from {handle.name}"
            raise BridgeError(msg)
        return created

    def set_field(self, handle: StoreHandle, item_id: str, field: str, value: Any) -> bool:
        return bool(
            self._jxa(
                {
                    "domain": handle.domain.value,
                    "action": "set",
                    "key": handle.key,
                    "id": item_id,
                    "field": self._native(handle.domain, field),
                    "value": value,
                }
            )
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def send_message(self, phone_number: str, text: str) -> None:
        self._run(["-e", SEND_MESSAGE_SCRIPT, phone_number, text])

    def read_messages(self, phone_number: str, limit: int) -> list[dict[str, Any]]:
        return self._chat_db.read(phone_number, limit)

    def unread_messages(self, limit: int) -> list[dict[str, Any]]:
        return self._chat_db.unread(limit)
