"""Search predicates and pure matching functions.

The backing applications disagree on case sensitivity and substring
semantics, so the broadened fallback search is done here on plain
records rather than delegated to the application.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import BaseModel, field_validator

from applemcp.domain.records import CollectionItem
from applemcp.domain.timestamps import ensure_aware


class SearchPredicate(BaseModel):
    """Filter handed to a collection source's ``search``.

    ``text`` is matched as an exact substring against ``fields``.
    ``start``/``end`` bound an inclusive date range (calendar only).
    """

    model_config = {"frozen": True}

    text: str | None = None
    fields: tuple[str, ...] = ()
    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    @property
    def has_date_range(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_text_only(self) -> bool:
        """True when the predicate filters on text and nothing else."""
        return bool(self.text) and not self.has_date_range


def _field_values(item: CollectionItem, fields: Sequence[str]) -> Iterable[str]:
    for name in fields:
        value = getattr(item, name, None)
        if isinstance(value, str) and value:
            yield value


def contains_text(item: CollectionItem, text: str, fields: Sequence[str]) -> bool:
    """Exact, case-sensitive substring match on any of *fields*."""
    return any(text in value for value in _field_values(item, fields))


def matches_fallback(item: CollectionItem, text: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match on any of *fields*."""
    needle = text.casefold()
    return any(needle in value.casefold() for value in _field_values(item, fields))


def overlaps_range(
    item_start: datetime,
    item_end: datetime,
    start: datetime | None,
    end: datetime | None,
) -> bool:
    """True when ``[item_start, item_end]`` intersects ``[start, end]``.

    Both bounds are inclusive and either may be open.
    """
    if start is not None and ensure_aware(item_end) < start:
        return False
    if end is not None and ensure_aware(item_start) > end:
        return False
    return True


def fallback_filter[T: CollectionItem](
    items: Iterable[T], text: str, fields: Sequence[str]
) -> list[T]:
    """Keep the items whose *fields* contain *text*, ignoring case."""
    return [item for item in items if matches_fallback(item, text, fields)]
