"""Default introspection provider: reads a class's own annotations.

``describe_fields`` is what ``JSONCoder.json_fields()`` returns unless a
type overrides it, and what plain dataclasses get.  ``declared_defaults``
collects dataclass defaults and plain class-attribute defaults so decoded
instances can be filled without calling ``__init__``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any, ClassVar, get_origin, get_type_hints

from json_coder.errors import SchemaError
from json_coder.schema.fields import FieldInfo

__all__ = ["declared_defaults", "describe_fields", "is_mappable", "type_hints"]


def is_mappable(tp: Any) -> bool:
    """Return True if ``tp`` can be the declared type of a nested object."""
    return isinstance(tp, type) and (
        dataclasses.is_dataclass(tp) or callable(getattr(tp, "json_fields", None))
    )


def type_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations of ``cls`` (MRO order, ``Annotated`` kept)."""
    try:
        return get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"{cls.__qualname__}: cannot resolve annotation ({exc})"
        raise SchemaError(msg) from exc


def _is_class_level(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar or isinstance(
        hint, dataclasses.InitVar
    )


def describe_fields(cls: type) -> list[FieldInfo]:
    """Enumerate the public members of ``cls`` that may take part in JSON.

    Annotated instance attributes are read-write.  Properties with an
    annotated getter are included too, read-write only when they define a
    setter.  ``ClassVar``/``InitVar`` annotations and names starting with an
    underscore are skipped.
    """
    infos: list[FieldInfo] = []
    for name, hint in type_hints(cls).items():
        if name.startswith("_") or _is_class_level(hint):
            continue
        if isinstance(getattr(cls, name, None), property):
            continue
        infos.append(FieldInfo(name, hint, read_write=True))

    seen = {info.name for info in infos}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in seen or not isinstance(attr, property):
                continue
            if attr.fget is None:
                continue
            returns = get_type_hints(attr.fget, include_extras=True).get("return")
            if returns is None:
                continue
            seen.add(name)
            infos.append(FieldInfo(name, returns, read_write=attr.fset is not None))
    return infos


def declared_defaults(
    cls: type,
) -> dict[str, tuple[Any, Callable[[], Any] | None]]:
    """Map attribute name -> ``(default, default_factory)``.

    Missing entries use ``dataclasses.MISSING`` / None.  Dataclass field
    metadata wins; otherwise a plain class attribute counts as the default.
    """
    defaults: dict[str, tuple[Any, Callable[[], Any] | None]] = {}
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            factory = None if f.default_factory is dataclasses.MISSING else f.default_factory
            defaults[f.name] = (f.default, factory)
        return defaults
    for name, hint in type_hints(cls).items():
        if _is_class_level(hint):
            continue
        value = getattr(cls, name, dataclasses.MISSING)
        if isinstance(value, property) or callable(value):
            continue
        defaults[name] = (value, None)
    return defaults
