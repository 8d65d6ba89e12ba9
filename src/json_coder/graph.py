"""Graph operations built on the mapper: deep ``clone`` and structural ``diff``.

``clone`` round-trips an object through a value tree with relaxed
requirement checks, so nil required fields survive the copy.  ``diff``
walks two objects of the same class field by field and returns a partial
object holding only what changed, or None when nothing did.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any, TypeVar

from json_coder.config import NamingConvention, get_global_options
from json_coder.errors import (
    DateFormatError,
    ExpectedObjectError,
    InternalInconsistencyError,
    TypeMismatchError,
)
from json_coder.mapper import Mapper, Traversal
from json_coder.schema.fields import FieldKind, KindTag
from json_coder.schema.introspection import is_mappable

__all__ = ["clone", "diff"]

T = TypeVar("T")


def clone(obj: T, mapper: Mapper | None = None) -> T:
    """Return a structurally independent deep copy of ``obj``.

    Every field reachable through nested objects, lists and maps is copied;
    ignored and private attributes are reset to their declared defaults.

    Raises:
        InternalInconsistencyError: ``obj`` holds a value that contradicts
            its own schema (wraps the underlying mismatch).
        CyclicGraphError: ``obj`` references itself.
    """
    mapper = mapper if mapper is not None else Mapper()
    encoder, _ = get_global_options()
    options = replace(
        encoder, naming=NamingConvention.NO_MAPPING, relax_requirements=True
    )
    try:
        tree = mapper.encode(obj, options)
        return mapper.decode(tree, type(obj), options)
    except (TypeMismatchError, DateFormatError, ExpectedObjectError) as exc:
        msg = f"cannot clone {type(obj).__qualname__}: {exc}"
        raise InternalInconsistencyError(msg, path=exc.path) from exc


def diff(a: T, b: T, mapper: Mapper | None = None) -> T | None:
    """Return the fields of ``b`` that differ from ``a``, or None if equal.

    The result is a fresh instance of the common class.  Changed fields hold
    ``b``'s value (a nested sub-diff for nested objects that both sides
    have); every other field is left at its type default and cannot be told
    apart from "unset".  Treat the result as write-only: do not diff or
    clone it again.

    Lists and maps are compared element by element; any difference
    (including length or key set) puts ``b``'s whole collection in the
    result.

    Raises:
        TypeMismatchError: ``a`` and ``b`` are not of the same class.
        CyclicGraphError: The graphs reference themselves.
    """
    if type(a) is not type(b):
        raise TypeMismatchError("", type(a).__qualname__, type(b).__qualname__)
    mapper = mapper if mapper is not None else Mapper()
    encoder, _ = get_global_options()
    return _Differ(mapper, Traversal(encoder)).objects(a, b, "")


class _Differ:
    """Field-wise structural comparison of two object graphs."""

    def __init__(self, mapper: Mapper, state: Traversal) -> None:
        self._mapper = mapper
        self._state = state

    def objects(self, a: Any, b: Any, path: str) -> Any:
        schema = self._mapper.schema_for(type(a))
        self._state.enter(a, path)
        try:
            changed: dict[str, Any] = {}
            for spec in schema.fields:
                field_path = f"{path}/{spec.source_name}"
                va = getattr(a, spec.source_name, None)
                vb = getattr(b, spec.source_name, None)
                if spec.kind.tag is KindTag.OBJECT and _same_class(va, vb):
                    sub = self.objects(va, vb, field_path)
                    if sub is not None:
                        changed[spec.source_name] = sub
                elif not self._equal(va, vb, spec.kind, field_path):
                    changed[spec.source_name] = vb
        finally:
            self._state.leave(a)

        if not changed:
            return None
        result = schema.new_instance()
        for name, value in changed.items():
            object.__setattr__(result, name, value)
        return result

    def _equal(self, va: Any, vb: Any, kind: FieldKind, path: str) -> bool:
        if va is None or vb is None:
            return va is None and vb is None
        tag = kind.tag
        if tag is KindTag.OBJECT:
            return _same_class(va, vb) and self.objects(va, vb, path) is None
        if tag is KindTag.LIST:
            return self._lists_equal(va, vb, kind, path)
        if tag is KindTag.MAP:
            return self._maps_equal(va, vb, kind, path)
        if tag is KindTag.ANY:
            return self._any_equal(va, vb, path)
        return bool(va == vb)

    def _lists_equal(self, va: Any, vb: Any, kind: FieldKind, path: str) -> bool:
        if not isinstance(va, Sequence) or not isinstance(vb, Sequence):
            return bool(va == vb)
        if len(va) != len(vb):
            return False
        element = kind.element
        assert element is not None
        self._state.enter(va, path)
        try:
            return all(
                self._equal(x, y, element, f"{path}/{i}")
                for i, (x, y) in enumerate(zip(va, vb, strict=True))
            )
        finally:
            self._state.leave(va)

    def _maps_equal(self, va: Any, vb: Any, kind: FieldKind, path: str) -> bool:
        if not isinstance(va, Mapping) or not isinstance(vb, Mapping):
            return bool(va == vb)
        if va.keys() != vb.keys():
            return False
        element = kind.element
        assert element is not None
        self._state.enter(va, path)
        try:
            return all(
                self._equal(va[key], vb[key], element, f"{path}/{key}") for key in va
            )
        finally:
            self._state.leave(va)

    def _any_equal(self, va: Any, vb: Any, path: str) -> bool:
        if _same_class(va, vb) and is_mappable(type(va)):
            return self.objects(va, vb, path) is None
        if isinstance(va, Mapping) and isinstance(vb, Mapping):
            return self._maps_equal(va, vb, _ANY_MAP, path)
        if isinstance(va, (list, tuple)) and isinstance(vb, (list, tuple)):
            return self._lists_equal(va, vb, _ANY_LIST, path)
        if isinstance(va, bool) or isinstance(vb, bool):
            return va is vb
        return bool(va == vb)


def _same_class(va: Any, vb: Any) -> bool:
    return va is not None and vb is not None and type(va) is type(vb)


_ANY_MAP = FieldKind(tag=KindTag.MAP, element=FieldKind(tag=KindTag.ANY))
_ANY_LIST = FieldKind(tag=KindTag.LIST, element=FieldKind(tag=KindTag.ANY))
