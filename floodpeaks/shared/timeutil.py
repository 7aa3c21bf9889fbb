"""Timestamp helpers — every instant in floodpeaks is an aware UTC datetime."""

from __future__ import annotations

from datetime import UTC, datetime


def parse_ts(value: str | datetime) -> datetime:
    """Parse an ISO-8601 string (or pass a datetime through) as aware UTC.

    Accepts a trailing ``Z``, explicit offsets and naive values; naive
    values are taken to be UTC already.

    Raises:
        ValueError: If the string is empty or not ISO-8601.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            raise ValueError("empty timestamp")
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso(dt: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (millisecond precision, UTC)."""
    dt = parse_ts(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def utcnow() -> datetime:
    return datetime.now(UTC)
