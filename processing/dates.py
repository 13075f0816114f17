"""Timestamp parsing for provider payloads.

Providers report publish times as ISO-8601, RFC 2822, their own
``YYYY-MM-DD HH:MM:SS +0000`` layout, human dates, or relative ages such as
``"3 hours ago"``. Everything resolves to an aware UTC datetime or ``None``;
nothing here ever invents a timestamp.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
import re
from typing import Any, Optional

RELATIVE_AGE_PATTERN = re.compile(r"^(\d+)\s+(minute|hour|day)s?\s+ago$", re.IGNORECASE)

_UNIT_SECONDS = {
    "minute": 60,
    "hour": 60 * 60,
    "day": 24 * 60 * 60,
}

_EXTRA_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_relative_age(value: Any, now: Optional[datetime] = None) -> Optional[datetime]:
    """Turn ``"N minutes/hours/days ago"`` into an absolute UTC datetime."""
    text = str(value or "").strip()
    match = RELATIVE_AGE_PATTERN.match(text)
    if not match:
        return None

    amount = int(match.group(1))
    seconds = amount * _UNIT_SECONDS[match.group(2).lower()]
    if seconds <= 0:
        return None

    reference = _as_utc(now) if now else utcnow()
    try:
        return reference - timedelta(seconds=seconds)
    except OverflowError:
        return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an absolute timestamp in any of the provider formats."""
    if isinstance(value, datetime):
        return _as_utc(value)

    text = str(value or "").strip()
    if not text:
        return None

    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _EXTRA_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def to_iso(value: datetime) -> str:
    return _as_utc(value).isoformat(timespec="seconds")


def resolve_timestamp(value: Any, now: Optional[datetime] = None) -> Optional[str]:
    """Relative or absolute timestamp as an ISO-8601 string, else ``None``."""
    resolved = parse_relative_age(value, now) or parse_datetime(value)
    return to_iso(resolved) if resolved else None
