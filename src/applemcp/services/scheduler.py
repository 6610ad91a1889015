"""MessageScheduler — deliver a message at a later time.

Scheduled messages live only in this process: a timer per message, lost
when the server exits. Delivery failures are logged; there is no retry.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime

from applemcp.domain.records import ScheduledMessage
from applemcp.infrastructure.bridge import BridgeError

logger = logging.getLogger(__name__)

SendFn = Callable[[str, str], None]


class MessageScheduler:
    """Own the timers for pending scheduled messages."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._lock = threading.Lock()
        self._timers: dict[str, tuple[ScheduledMessage, threading.Timer]] = {}

    def now(self) -> datetime:
        return self._clock()

    def schedule(
        self,
        phone_number: str,
        message: str,
        when: datetime,
        send: SendFn,
    ) -> ScheduledMessage:
        """Arrange for ``send(phone_number, message)`` to run at *when*."""
        entry = ScheduledMessage(
            id=uuid.uuid4().hex[:12],
            phone_number=phone_number,
            message=message,
            scheduled_time=when,
        )
        delay = max((when - self.now()).total_seconds(), 0.0)
        timer = threading.Timer(delay, self._deliver, args=(entry, send))
        timer.daemon = True
        with self._lock:
            self._timers[entry.id] = (entry, timer)
        timer.start()
        logger.info("Scheduled message %s to %s in %.0fs", entry.id, phone_number, delay)
        return entry

    def _deliver(self, entry: ScheduledMessage, send: SendFn) -> None:
        with self._lock:
            self._timers.pop(entry.id, None)
        try:
            send(entry.phone_number, entry.message)
        except BridgeError:
            logger.exception("Scheduled message %s to %s failed", entry.id, entry.phone_number)
            return
        logger.info("Delivered scheduled message %s", entry.id)

    def pending(self) -> list[ScheduledMessage]:
        """Messages not yet handed to the bridge, soonest first."""
        with self._lock:
            entries = [entry for entry, _ in self._timers.values()]
        return sorted(entries, key=lambda e: e.scheduled_time)

    def cancel_all(self) -> int:
        """Drop every pending message; returns how many were dropped."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for _, timer in timers:
            timer.cancel()
        return len(timers)
