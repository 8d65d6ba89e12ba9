"""ISO-8601 date helpers.

Full timestamps are written with ``datetime.isoformat()`` (offset included
for aware values); date-only values as ``YYYY-MM-DD``.  Parsing accepts the
forms understood by ``datetime.fromisoformat``, including a trailing ``Z``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time

__all__ = [
    "from_iso8601_string",
    "to_iso8601_date_string",
    "to_iso8601_datetime_string",
]

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")

# Date part followed by a "T" or space separator and at least HH:MM
_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def to_iso8601_datetime_string(value: date) -> str:
    """Format a date or datetime as a full ISO-8601 timestamp.

    A plain ``date`` is written as midnight of that day.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    return value.isoformat()


def to_iso8601_date_string(value: date) -> str:
    """Format a date or datetime as ``YYYY-MM-DD``, dropping any time portion."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def from_iso8601_string(text: str, *, date_only: bool = False) -> datetime | date:
    """Parse an ISO-8601 string.

    Args:
        text: The string to parse.
        date_only: When True, both ``YYYY-MM-DD`` and full timestamps are
            accepted and a ``date`` is returned (time portion discarded).
            When False, only full timestamps are accepted.

    Returns:
        A ``date`` when ``date_only`` is True, else a ``datetime``.

    Raises:
        ValueError: If ``text`` is not in an accepted form.
    """
    if date_only and _DATE_ONLY.fullmatch(text):
        return date.fromisoformat(text)
    if not _TIMESTAMP.match(text):
        msg = f"not an ISO-8601 timestamp: {text!r}"
        raise ValueError(msg)
    parsed = datetime.fromisoformat(text)
    return parsed.date() if date_only else parsed
