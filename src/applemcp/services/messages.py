"""MessagesService — send, read, schedule and list unread messages.

Reads come from the Messages database, sends go through the Messages
app. Unread messages are labelled with the sender's contact name when
Contacts is reachable; otherwise the raw handle is shown.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from applemcp.domain.arguments import (
    MessageReadArgs,
    MessageScheduleArgs,
    MessageSendArgs,
    MessageUnreadArgs,
)
from applemcp.domain.errors import (
    ArgumentValidationError,
    CreateFailedError,
    DomainAccessError,
    ToolError,
)
from applemcp.domain.records import MessageRecord
from applemcp.domain.types import Domain
from applemcp.infrastructure.bridge import BridgeError
from applemcp.services.base import BaseService
from applemcp.services.contacts import ContactsService, phone_key
from applemcp.services.result import ServiceResult
from applemcp.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class MessagesService(BaseService):
    domain = Domain.MESSAGES

    def _send(self, phone_number: str, text: str) -> None:
        try:
            self._ctx.bridge.send_message(phone_number, text)
        except BridgeError as exc:
            msg = f"Failed to send message to {phone_number}: {exc}"
            raise CreateFailedError(msg, detail={"phone_number": phone_number}) from exc

    def _load(
        self, action: str, rows_fn: Callable[[], list[dict[str, Any]]]
    ) -> list[MessageRecord]:
        with trace_span(f"messages:{action}"):
            try:
                rows = rows_fn()
            except BridgeError as exc:
                msg = f"Cannot read messages: {exc}"
                raise DomainAccessError(msg, detail={"domain": self.domain.value}) from exc
        return [MessageRecord.model_validate(row) for row in rows]

    @traced
    def send(self, args: MessageSendArgs) -> ServiceResult:
        self._require_access()
        self._send(args.phone_number, args.message)
        return ServiceResult(
            ok=True,
            op="messages.send",
            data={"phone_number": args.phone_number},
        )

    @traced
    def read(self, args: MessageReadArgs) -> ServiceResult:
        self._require_access()
        limit = self._ctx.messages.clamp(args.limit)
        records = self._load(
            "read", lambda: self._ctx.bridge.read_messages(args.phone_number, limit)
        )
        return ServiceResult(
            ok=True,
            op="messages.read",
            data={
                "phone_number": args.phone_number,
                "count": len(records),
                "items": [m.model_dump(mode="json") for m in records],
            },
        )

    @traced
    def schedule(self, args: MessageScheduleArgs) -> ServiceResult:
        scheduler = self._ctx.scheduler
        if args.scheduled_time <= scheduler.now():
            msg = "'scheduledTime' must be in the future"
            raise ArgumentValidationError(msg, field="scheduledTime")
        self._require_access()
        entry = scheduler.schedule(
            args.phone_number, args.message, args.scheduled_time, self._ctx.bridge.send_message
        )
        return ServiceResult(
            ok=True,
            op="messages.schedule",
            data={"item": entry.model_dump(mode="json"), "pending": len(scheduler.pending())},
        )

    @traced
    def unread(self, args: MessageUnreadArgs) -> ServiceResult:
        self._require_access()
        limit = self._ctx.messages.clamp(args.limit)
        records = self._load("unread", lambda: self._ctx.bridge.unread_messages(limit))
        directory = self._phone_directory() if records else {}
        labelled = [
            m.model_copy(update={"display_name": _display_name(m, directory)}) for m in records
        ]
        return ServiceResult(
            ok=True,
            op="messages.unread",
            data={
                "count": len(labelled),
                "items": [m.model_dump(mode="json") for m in labelled],
            },
        )

    def _phone_directory(self) -> dict[str, str]:
        try:
            return ContactsService(self._ctx).phone_directory()
        except ToolError as exc:
            logger.debug("Contacts unavailable for sender names: %s", exc.message)
            return {}


def _display_name(record: MessageRecord, directory: dict[str, str]) -> str:
    if record.is_from_me:
        return "Me"
    return directory.get(phone_key(record.sender)) or record.sender
