"""BaseService and ToolContext — foundation for the per-tool services.

Every service receives a :class:`ToolContext` at construction time. The
context bundles the automation bridge, the capability gate and the
settings the handlers need; it holds no backing-store data, so nothing
read from an application outlives the request that read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from applemcp.config.models import MessagesConfig
from applemcp.services.aggregator import Aggregator
from applemcp.services.gate import CapabilityGate
from applemcp.services.scheduler import MessageScheduler

if TYPE_CHECKING:
    from applemcp.domain.records import CollectionItem
    from applemcp.domain.types import Domain
    from applemcp.infrastructure.bridge import AutomationBridge


@dataclass
class ToolContext:
    """Collaborators shared by all handlers of one server process."""

    bridge: AutomationBridge
    messages: MessagesConfig = field(default_factory=MessagesConfig)
    scheduler: MessageScheduler = field(default_factory=MessageScheduler)
    gate: CapabilityGate = field(init=False)

    def __post_init__(self) -> None:
        self.gate = CapabilityGate(self.bridge)


class BaseService:
    """Abstract base for the per-domain services.

    Subclasses set ``domain`` and implement one method per operation.
    Every public method must pass the capability gate before reading
    from or writing to any collection source.

    Usage::

        class RemindersService(BaseService):
            domain = Domain.REMINDERS

            def list(self, args: ReminderListArgs) -> ServiceResult:
                found = self._open(Reminder).list_all()
                ...
    """

    domain: ClassVar[Domain]

    def __init__(self, ctx: ToolContext) -> None:
        self._ctx = ctx

    def _require_access(self) -> None:
        self._ctx.gate.check_access(self.domain)

    def _open[T: CollectionItem](self, record_cls: type[T]) -> Aggregator[T]:
        """Check access, then return an aggregator over this domain's sources."""
        self._require_access()
        return Aggregator(self._ctx.bridge, self.domain, record_cls)
