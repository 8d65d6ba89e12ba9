"""Public API functions for json-coder.

Each call creates a fresh ``Mapper`` bound to the process-wide schema
registry, so schemas are built once per type while no other state is
carried between calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from json_coder import graph
from json_coder.config import (
    CoderOptions,
    get_global_options,
    set_global_options,
)
from json_coder.mapper import Mapper
from json_coder.values import JsonValue

__all__ = [
    "clone",
    "decode",
    "decode_list",
    "diff",
    "encode",
    "from_json",
    "from_json_list",
    "get_global_options",
    "set_global_options",
    "to_json",
    "to_json_bytes",
]

T = TypeVar("T")


def encode(obj: Any, options: CoderOptions | None = None) -> dict[str, Any]:
    """Convert a mappable object into a value tree.

    Args:
        obj:     Instance of a dataclass or ``JSONCoder`` subclass.
        options: Per-call options.  Defaults to the type's naming override,
                 else the global encoder options.

    Returns:
        A ``dict`` holding only JSON-compatible values.  Optional fields that
        are None are omitted; scalar fields are always present.
    """
    return Mapper().encode(obj, options)


def decode(tree: JsonValue, cls: type[T], options: CoderOptions | None = None) -> T:
    """Build an instance of ``cls`` from a value tree.

    Args:
        tree:    A JSON object (``dict``).  Unknown keys are ignored.
        cls:     Target mappable class.
        options: Per-call options.  Defaults to the type's naming override,
                 else the global decoder options.

    Returns:
        A new ``cls`` instance.  ``__init__`` is not called; fields absent
        from an optional key keep their declared default.
    """
    return Mapper().decode(tree, cls, options)


def decode_list(
    trees: Sequence[JsonValue],
    cls: type[T],
    options: CoderOptions | None = None,
) -> list[T]:
    """Decode each object of ``trees`` into ``cls``.

    Any element failure fails the whole call; no partial list is returned.
    """
    return Mapper().decode_list(trees, cls, options)


def to_json(obj: Any, options: CoderOptions | None = None) -> str:
    """Encode ``obj`` and serialize it as JSON text."""
    return Mapper().to_json(obj, options)


def to_json_bytes(obj: Any, options: CoderOptions | None = None) -> bytes:
    """Encode ``obj`` and serialize it as UTF-8 JSON bytes."""
    return Mapper().to_json_bytes(obj, options)


def from_json(data: str | bytes, cls: type[T], options: CoderOptions | None = None) -> T:
    """Parse a JSON object from text or bytes and decode it into ``cls``."""
    return Mapper().from_json(data, cls, options)


def from_json_list(
    data: str | bytes,
    cls: type[T],
    options: CoderOptions | None = None,
) -> list[T]:
    """Parse a JSON array of objects and decode each into ``cls``."""
    return Mapper().from_json_list(data, cls, options)


def clone(obj: T) -> T:
    """Return a deep copy of ``obj`` made by encoding and decoding it.

    Required-field checks are relaxed, so a nil required field is copied as
    nil instead of failing.
    """
    return graph.clone(obj)


def diff(a: T, b: T) -> T | None:
    """Return a partial ``b`` holding only the fields that differ from ``a``.

    Returns:
        None when the two objects are structurally equal.  Otherwise a new
        instance whose unchanged fields sit at their type default; treat it
        as write-only.
    """
    return graph.diff(a, b)
