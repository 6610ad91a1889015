"""Read-only access to the Messages database (``chat.db``).

SQLAlchemy Core over SQLite, opened with ``mode=ro`` so the server can
never write to the user's message history. Only the columns the tools
need are declared.

On recent macOS releases the ``text`` column is often NULL and the body
lives in ``attributedBody`` (a typedstream-encoded NSAttributedString);
:func:`decode_attributed_body` extracts the plain text from it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from sqlalchemy import (
    Column,
    Integer,
    LargeBinary,
    MetaData,
    Table,
    Text,
    create_engine,
    func,
    or_,
    select,
)
from sqlalchemy.engine import Connection, Row
from sqlalchemy.exc import SQLAlchemyError

from applemcp.infrastructure.bridge import BridgeError

logger = logging.getLogger(__name__)

metadata = MetaData()

handle = Table(
    "handle",
    metadata,
    Column("ROWID", Integer, primary_key=True),
    Column("id", Text, nullable=False),  # phone number or email
)

message = Table(
    "message",
    metadata,
    Column("ROWID", Integer, primary_key=True),
    Column("text", Text),
    Column("attributedBody", LargeBinary),
    Column("handle_id", Integer),
    Column("date", Integer),  # Apple epoch, seconds or nanoseconds
    Column("is_from_me", Integer, default=0),
    Column("is_read", Integer, default=0),
    Column("associated_message_type", Integer, default=0),
)

APPLE_EPOCH = datetime(2001, 1, 1, tzinfo=UTC)

_TYPEDSTREAM_MARKER = b"NSString\x01\x94\x84\x01+"


def apple_time_to_datetime(value: int | None) -> datetime:
    """Convert a Messages timestamp to an aware UTC datetime.

    Since macOS 10.13 the column holds nanoseconds; older databases
    store seconds.
    """
    raw = value or 0
    if raw > 10**11:
        return APPLE_EPOCH + timedelta(microseconds=raw // 1000)
    return APPLE_EPOCH + timedelta(seconds=raw)


def decode_attributed_body(blob: bytes | None) -> str | None:
    """Extract plain text from a typedstream NSAttributedString blob.

    The text follows the ``NSString`` marker, prefixed by its length:
    one byte below 0x81, or 0x81/0x82 followed by a little-endian
    2/4-byte length.
    """
    if not blob:
        return None
    idx = blob.find(_TYPEDSTREAM_MARKER)
    if idx < 0:
        return None
    start = idx + len(_TYPEDSTREAM_MARKER)
    if start >= len(blob):
        return None

    first = blob[start]
    if first < 0x81:
        length, text_start = first, start + 1
    elif first == 0x81 and start + 2 < len(blob):
        length, text_start = int.from_bytes(blob[start + 1 : start + 3], "little"), start + 3
    elif first == 0x82 and start + 4 < len(blob):
        length, text_start = int.from_bytes(blob[start + 1 : start + 5], "little"), start + 5
    else:
        return None

    raw = blob[text_start : text_start + length]
    return raw.decode("utf-8", errors="replace").strip() or None


def handle_candidates(phone_number: str) -> list[str]:
    """Spellings under which Messages may have stored *phone_number*."""
    raw = phone_number.strip()
    digits = re.sub(r"\D", "", raw)
    candidates = [raw]
    if digits:
        candidates += [digits, f"+{digits}"]
        if len(digits) == 10:
            candidates.append(f"+1{digits}")
    return list(dict.fromkeys(candidates))


class ChatDatabase:
    """Query helper over ``chat.db``.

    An engine is created per call and disposed afterwards; nothing is
    held open between requests.
    """

    def __init__(self, db_path: Path) -> None:
        self._path = db_path.expanduser()

    @contextmanager
    def _connect(self) -> Generator[Connection]:
        if not self._path.is_file():
            msg = f"Messages database not found at {self._path}"
            raise BridgeError(msg)
        engine = create_engine(f"sqlite:///file:{self._path}?mode=ro&uri=true")
        try:
            with engine.connect() as conn:
                yield conn
        except SQLAlchemyError as exc:
            msg = f"Cannot read Messages database: {exc}"
            raise BridgeError(msg) from exc
        finally:
            engine.dispose()

    def probe(self) -> int:
        """Count messages; fails when the database is unreadable."""
        with self._connect() as conn:
            return int(conn.execute(select(func.count()).select_from(message)).scalar_one())

    def read(self, phone_number: str, limit: int) -> list[dict[str, Any]]:
        """Latest *limit* messages exchanged with *phone_number*, oldest first."""
        stmt = (
            select(
                message.c.ROWID,
                message.c.text,
                message.c.attributedBody,
                message.c.date,
                message.c.is_from_me,
                handle.c.id.label("sender"),
            )
            .join(handle, message.c.handle_id == handle.c.ROWID)
            .where(handle.c.id.in_(handle_candidates(phone_number)))
            .where(message.c.associated_message_type == 0)
            .where(or_(message.c.text.is_not(None), message.c.attributedBody.is_not(None)))
            .order_by(message.c.date.desc())
            .limit(limit)
        )
        with self._connect() as conn:
            rows = conn.execute(stmt).all()
        return [r for r in (self._to_record(row) for row in reversed(rows)) if r is not None]

    def unread(self, limit: int) -> list[dict[str, Any]]:
        """Most recent unread incoming messages, newest first."""
        stmt = (
            select(
                message.c.ROWID,
                message.c.text,
                message.c.attributedBody,
                message.c.date,
                message.c.is_from_me,
                handle.c.id.label("sender"),
            )
            .outerjoin(handle, message.c.handle_id == handle.c.ROWID)
            .where(message.c.is_read == 0)
            .where(message.c.is_from_me == 0)
            .where(message.c.associated_message_type == 0)
            .where(or_(message.c.text.is_not(None), message.c.attributedBody.is_not(None)))
            .order_by(message.c.date.desc())
            .limit(limit)
        )
        with self._connect() as conn:
            rows = conn.execute(stmt).all()
        return [r for r in (self._to_record(row) for row in rows) if r is not None]

    @staticmethod
    def _to_record(row: Row[Any]) -> dict[str, Any] | None:
        body = (row.text or "").strip() or decode_attributed_body(row.attributedBody)
        if not body:
            logger.debug("Skipping message %s with no decodable body", row.ROWID)
            return None
        return {
            "id": str(row.ROWID),
            "content": body,
            "date": apple_time_to_datetime(row.date),
            "sender": row.sender or "",
            "is_from_me": bool(row.is_from_me),
        }
