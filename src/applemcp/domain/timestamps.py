"""ISO-8601 parsing and timezone normalization.

Every datetime that crosses the domain boundary is timezone-aware.
Naive inputs are interpreted in the local timezone.
"""

from __future__ import annotations

from datetime import datetime


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_iso(value: object) -> datetime:
    """Parse an ISO-8601 string into an aware datetime.

    Raises ValueError for non-strings and unparsable text so pydantic
    reports it against the offending field.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if not isinstance(value, str):
        msg = "must be an ISO-8601 string"
        raise ValueError(msg)
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        msg = f"{value!r} is not a valid ISO-8601 timestamp"
        raise ValueError(msg) from None
    return ensure_aware(parsed)
