"""Scalar coercion rules between Python field values and tree values.

Numbers and booleans are mutually convertible in both directions
(``False`` <-> ``0``, ``int`` <-> ``float`` by value).  A conversion that
would lose information (a non-integral or non-finite float into an ``int``
field, or an int too large for a float) is a ``TypeMismatchError``.
Strings are never coerced to or from any other kind.

Dates are written as ISO-8601 strings; see ``json_coder.dates``.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any

from json_coder.dates import (
    from_iso8601_string,
    to_iso8601_date_string,
    to_iso8601_datetime_string,
)
from json_coder.errors import DateFormatError, TypeMismatchError
from json_coder.schema.fields import FieldKind, KindTag
from json_coder.values import describe

__all__ = ["decode_date", "decode_scalar", "encode_date", "encode_scalar"]


def _convert_number(value: Any, kind: FieldKind, path: str) -> int | float | bool:
    # bool subclasses int: check it first
    if isinstance(value, bool):
        number: int | float = int(value)
    elif isinstance(value, (int, float)):
        number = value
    else:
        raise TypeMismatchError(path, kind.describe(), describe(value))

    if kind.tag is KindTag.BOOLEAN:
        return bool(number)
    if kind.py_type is float:
        try:
            result = float(number)
        except OverflowError:
            raise TypeMismatchError(path, "float", f"out-of-range {number}") from None
        if not math.isfinite(result):
            raise TypeMismatchError(path, "float", f"number {number!r}")
        return result
    if isinstance(number, float):
        if not math.isfinite(number) or not number.is_integer():
            raise TypeMismatchError(path, "integer", f"number {number!r}")
        return int(number)
    return number


def encode_scalar(value: Any, kind: FieldKind, path: str) -> int | float | bool:
    """Tree value for a NUMBER or BOOLEAN field.  ``None`` gives the zero value."""
    if value is None and kind.scalar:
        return kind.zero()
    return _convert_number(value, kind, path)


def decode_scalar(value: Any, kind: FieldKind, path: str) -> int | float | bool:
    """Field value for a NUMBER or BOOLEAN field from a non-null tree value."""
    return _convert_number(value, kind, path)


def encode_date(value: Any, kind: FieldKind, path: str) -> str:
    """ISO-8601 string for a DATE field (``YYYY-MM-DD`` when date-only)."""
    if not isinstance(value, date):
        raise TypeMismatchError(path, kind.describe(), type(value).__name__)
    if kind.date_only:
        return to_iso8601_date_string(value)
    return to_iso8601_datetime_string(value)


def decode_date(value: Any, kind: FieldKind, path: str) -> date | datetime:
    """Field value for a DATE field from a tree string.

    Date-only fields accept both ``YYYY-MM-DD`` and full timestamps (the time
    portion is discarded); other date fields require a full timestamp.
    """
    if not isinstance(value, str):
        raise TypeMismatchError(path, "ISO-8601 date string", describe(value))
    try:
        parsed = from_iso8601_string(value, date_only=kind.date_only)
    except ValueError:
        raise DateFormatError(path, value, date_only=kind.date_only) from None
    if kind.py_type is datetime and not isinstance(parsed, datetime):
        return datetime.combine(parsed, time())
    return parsed
