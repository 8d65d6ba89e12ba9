"""Value tree primitives: the JSON-shaped data the engine produces and consumes.

A value tree is plain Python data: ``dict`` (string keys), ``list``, ``str``,
``int``, ``float``, ``bool`` and ``None``.  Numbers carry no int/float
distinction of their own; the declared kind of the receiving field decides
how they are coerced on decode.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum, auto
from typing import Any

__all__ = ["JsonKind", "JsonValue", "describe", "is_json_value", "kind_of"]

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


class JsonKind(StrEnum):
    """The six kinds of JSON value.

    StrEnum values are the lowercased member names, which double as the
    human-readable kind names used in error messages.
    """

    NULL = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


def kind_of(value: Any) -> JsonKind:
    """Classify a tree value.

    Raises:
        TypeError: If value is not a valid JSON type.
    """
    # bool subclasses int: check it first
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if value is None:
        return JsonKind.NULL
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def describe(value: Any) -> str:
    """Kind name of ``value`` for error messages; Python type name if not JSON."""
    try:
        return str(kind_of(value))
    except TypeError:
        return type(value).__name__


def is_json_value(value: Any) -> bool:
    """Return True if ``value`` is a well-formed value tree."""
    if isinstance(value, Mapping):
        return all(
            isinstance(k, str) and is_json_value(v) for k, v in value.items()
        )
    if isinstance(value, (list, tuple)):
        return all(is_json_value(item) for item in value)
    return value is None or isinstance(value, (str, int, float, bool))
