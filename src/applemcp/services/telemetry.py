"""Request timing for ``@traced`` handlers and ``trace_span`` round trips.

Disabled by default; the cost is one ContextVar lookup per call. With
``--verbose`` each handler call records a tree of timings (the permission
probe, one entry per collection source, message database reads) and
attaches it to ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from applemcp.services.result import ServiceResult

log = structlog.get_logger("applemcp.telemetry")

_enabled: ContextVar[bool] = ContextVar("applemcp_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("applemcp_active_span", default=None)


@dataclass
class Span:
    """One timed step of a request; children are the steps it made."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def elapsed_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    @property
    def round_trips(self) -> int:
        """Leaf steps below this span, i.e. calls that left the process."""
        if not self.children:
            return 0
        return sum(child.round_trips or 1 for child in self.children)

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "elapsed_ms": round(self.elapsed_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Generator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finished = time.perf_counter()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time one step under the active handler span.

    Yields None when telemetry is off or no handler is being traced, so
    callers guard annotations with ``if span is not None``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name)
    parent.children.append(child)
    with _activate(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service handler and attach its span tree to the result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        ok = False
        try:
            with _activate(root):
                result = func(*args, **kwargs)
            ok = True
        finally:
            log.debug(
                "handler.timed",
                handler=root.name,
                elapsed_ms=round(root.elapsed_ms, 2),
                round_trips=root.round_trips,
                ok=ok,
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn timing on for this context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The span steps are currently recorded under, if any."""
    return _active.get() if _enabled.get() else None
