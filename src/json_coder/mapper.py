"""Mapper: the engine that converts object graphs to value trees and back.

This is the central wiring layer between the schema registry, the naming
rules, scalar coercion and the text codec.

Architecture:
- ``encode()`` and ``decode()`` resolve the effective options once per
  top-level call (explicit > type override > global default), then walk the
  object graph (or tree) depth-first in schema-field order.
- Nested mappable objects, list elements and map values recurse through
  ``_encode_value`` / ``_decode_value`` with a JSON Pointer path, so every
  error names the exact member that failed.
- A traversal keeps the identities of the objects on its current path.  An
  object that re-enters its own path, or a graph nested deeper than
  ``max_depth``, raises ``CyclicGraphError``.
- The first failure aborts the whole call; there are no partial results.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from json_coder.codec import JSONTextCodec
from json_coder.coercion import decode_date, decode_scalar, encode_date, encode_scalar
from json_coder.config import CoderOptions, Direction, resolve_options
from json_coder.errors import (
    CyclicGraphError,
    ExpectedObjectError,
    RequiredFieldMissingError,
    RequiredFieldNilError,
    SchemaError,
    TypeMismatchError,
)
from json_coder.protocols import TextCodec
from json_coder.schema.fields import FieldKind, KindTag, TypeSchema
from json_coder.schema.introspection import is_mappable
from json_coder.schema.registry import SchemaRegistry, default_registry
from json_coder.values import JsonValue, describe

__all__ = ["Mapper"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ANY = FieldKind(tag=KindTag.ANY)


def _require_mappable(cls: type) -> None:
    if not is_mappable(cls):
        msg = f"{cls!r} is not a mappable type (dataclass or JSONCoder subclass)"
        raise SchemaError(msg)


@dataclass(slots=True)
class Traversal:
    """State of one top-level call."""

    options: CoderOptions
    active: set[int] = field(default_factory=set)
    depth: int = 0

    @property
    def relaxed(self) -> bool:
        return self.options.relax_requirements

    def enter(self, node: object, path: str) -> None:
        if id(node) in self.active:
            msg = f"reference cycle at {path or '/'!r}: {type(node).__qualname__} re-enters itself"
            raise CyclicGraphError(msg, path=path)
        if self.depth >= self.options.max_depth:
            msg = f"graph nested deeper than max_depth={self.options.max_depth} at {path!r}"
            raise CyclicGraphError(msg, path=path)
        self.active.add(id(node))
        self.depth += 1

    def leave(self, node: object) -> None:
        self.active.discard(id(node))
        self.depth -= 1


class Mapper:
    """Schema-driven converter between mappable objects and value trees.

    Example::

        from json_coder.mapper import Mapper

        mapper = Mapper()
        tree = mapper.encode(Person(name="Ann", birth_date=date(2020, 1, 2)))
        # {"name": "Ann", "birth_date": "2020-01-02"}
        person = mapper.decode(tree, Person)
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        codec: TextCodec | None = None,
    ) -> None:
        """Initialise the mapper.

        Args:
            registry: Schema cache.  Defaults to the process-wide registry.
            codec: Text codec for the ``*_json`` entry points.  Defaults to
                ``JSONTextCodec()``.
        """
        if codec is not None and not isinstance(codec, TextCodec):
            msg = f"codec must implement parse() and serialize(), got {codec!r}"
            raise TypeError(msg)
        self._registry: SchemaRegistry = (
            registry if registry is not None else default_registry
        )
        self._codec: TextCodec = codec if codec is not None else JSONTextCodec()

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def schema_for(self, cls: type) -> TypeSchema:
        return self._registry.schema_for(cls)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, obj: Any, options: CoderOptions | None = None) -> dict[str, Any]:
        """Convert a mappable object into a value tree (a ``dict``).

        Args:
            obj: Instance of a mappable class.
            options: Per-call options.  None uses the type's override and the
                global encoder defaults.

        Raises:
            RequiredFieldNilError: A required non-scalar field holds None.
            TypeMismatchError: A field value does not match its declared kind.
            CyclicGraphError: The graph references itself or is too deep.
            SchemaError: The object's class cannot be described.
        """
        _require_mappable(type(obj))
        schema = self._registry.schema_for(type(obj))
        effective = resolve_options(
            schema.naming_for(Direction.ENCODE), options, Direction.ENCODE
        )
        return self._encode_object(obj, "", Traversal(effective))

    def decode(
        self,
        tree: JsonValue,
        cls: type[T],
        options: CoderOptions | None = None,
    ) -> T:
        """Build an instance of ``cls`` from a value tree.

        Unknown keys are ignored.

        Raises:
            ExpectedObjectError: ``tree`` is not a JSON object.
            RequiredFieldMissingError: A required key is absent.
            RequiredFieldNilError: A required key holds null.
            TypeMismatchError: A value does not match its field's kind.
            DateFormatError: A date string is malformed.
            CyclicGraphError: The tree is nested deeper than ``max_depth``.
        """
        if not isinstance(tree, Mapping):
            raise ExpectedObjectError(describe(tree))
        _require_mappable(cls)
        schema = self._registry.schema_for(cls)
        effective = resolve_options(
            schema.naming_for(Direction.DECODE), options, Direction.DECODE
        )
        return self._decode_object(tree, cls, "", Traversal(effective))

    def decode_list(
        self,
        trees: Sequence[JsonValue],
        cls: type[T],
        options: CoderOptions | None = None,
    ) -> list[T]:
        """Decode every element of ``trees`` into ``cls``; all or nothing.

        Raises:
            TypeMismatchError: ``trees`` is not an array.
            ExpectedObjectError: An element is not a JSON object.
            MappingError: The first element failure (path ``/<index>/...``).
        """
        if isinstance(trees, (str, bytes)) or not isinstance(trees, Sequence):
            raise TypeMismatchError("", "array", describe(trees))
        _require_mappable(cls)
        schema = self._registry.schema_for(cls)
        effective = resolve_options(
            schema.naming_for(Direction.DECODE), options, Direction.DECODE
        )
        results: list[T] = []
        for index, tree in enumerate(trees):
            path = f"/{index}"
            if not isinstance(tree, Mapping):
                raise ExpectedObjectError(describe(tree), path=path)
            results.append(self._decode_object(tree, cls, path, Traversal(effective)))
        return results

    def to_json(self, obj: Any, options: CoderOptions | None = None) -> str:
        """Encode ``obj`` and serialize the tree to JSON text."""
        return self._codec.serialize(self.encode(obj, options))

    def to_json_bytes(self, obj: Any, options: CoderOptions | None = None) -> bytes:
        """Encode ``obj`` and serialize the tree to UTF-8 JSON bytes."""
        return self.to_json(obj, options).encode("utf-8")

    def from_json(
        self,
        data: str | bytes,
        cls: type[T],
        options: CoderOptions | None = None,
    ) -> T:
        """Parse JSON text (an object) and decode it into ``cls``."""
        return self.decode(self._codec.parse(data), cls, options)

    def from_json_list(
        self,
        data: str | bytes,
        cls: type[T],
        options: CoderOptions | None = None,
    ) -> list[T]:
        """Parse JSON text (an array of objects) and decode every element."""
        parsed = self._codec.parse(data)
        if not isinstance(parsed, list):
            raise TypeMismatchError("", "array", describe(parsed))
        return self.decode_list(parsed, cls, options)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _encode_object(self, obj: Any, path: str, state: Traversal) -> dict[str, Any]:
        schema = self._registry.schema_for(type(obj))
        naming = state.options.naming
        schema.check_keys(naming, path)
        state.enter(obj, path)
        try:
            out: dict[str, Any] = {}
            for spec in schema.fields:
                key = spec.json_name(naming)
                field_path = f"{path}/{key}"
                value = getattr(obj, spec.source_name, None)
                if value is None and not spec.kind.scalar:
                    if spec.optional:
                        continue
                    if not state.relaxed:
                        raise RequiredFieldNilError(field_path)
                    out[key] = None
                    continue
                out[key] = self._encode_value(value, spec.kind, field_path, state)
            return out
        finally:
            state.leave(obj)

    def _encode_value(
        self, value: Any, kind: FieldKind, path: str, state: Traversal
    ) -> Any:
        tag = kind.tag
        if tag is KindTag.STRING:
            if not isinstance(value, str):
                raise TypeMismatchError(path, "string", type(value).__name__)
            return value
        if tag is KindTag.NUMBER or tag is KindTag.BOOLEAN:
            return encode_scalar(value, kind, path)
        if tag is KindTag.DATE:
            return encode_date(value, kind, path)
        if tag is KindTag.OBJECT:
            if kind.py_type is None or not isinstance(value, kind.py_type):
                raise TypeMismatchError(path, kind.describe(), type(value).__name__)
            return self._encode_object(value, path, state)
        if tag is KindTag.LIST:
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise TypeMismatchError(path, kind.describe(), type(value).__name__)
            return self._encode_items(enumerate(value), value, kind, path, state, [])
        if tag is KindTag.MAP:
            if not isinstance(value, Mapping):
                raise TypeMismatchError(path, kind.describe(), type(value).__name__)
            return self._encode_items(value.items(), value, kind, path, state, {})
        return self._encode_any(value, path, state)

    def _encode_items(
        self,
        items: Any,
        container: Any,
        kind: FieldKind,
        path: str,
        state: Traversal,
        out: Any,
    ) -> Any:
        element = kind.element
        assert element is not None
        state.enter(container, path)
        try:
            for key, item in items:
                if isinstance(out, dict) and not isinstance(key, str):
                    raise TypeMismatchError(path, "string map key", type(key).__name__)
                item_path = f"{path}/{key}"
                if item is None:
                    if not state.relaxed and element.tag is not KindTag.ANY:
                        raise RequiredFieldNilError(item_path)
                    encoded = None
                else:
                    encoded = self._encode_value(item, element, item_path, state)
                if isinstance(out, list):
                    out.append(encoded)
                else:
                    out[key] = encoded
            return out
        finally:
            state.leave(container)

    def _encode_any(self, value: Any, path: str, state: Traversal) -> Any:
        """Copy an untyped value, encoding any mappable objects inside it."""
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        if is_mappable(type(value)):
            return self._encode_object(value, path, state)
        if isinstance(value, Mapping):
            return self._encode_items(
                value.items(), value, FieldKind(KindTag.MAP, element=_ANY), path, state, {}
            )
        if isinstance(value, (list, tuple)):
            return self._encode_items(
                enumerate(value), value, FieldKind(KindTag.LIST, element=_ANY), path, state, []
            )
        raise TypeMismatchError(path, "JSON value", type(value).__name__)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _decode_object(
        self, tree: Mapping[str, Any], cls: type[T], path: str, state: Traversal
    ) -> T:
        schema = self._registry.schema_for(cls)
        naming = state.options.naming
        schema.check_keys(naming, path)
        state.enter(tree, path)
        try:
            obj = schema.new_instance()
            for spec in schema.fields:
                key = spec.json_name(naming)
                field_path = f"{path}/{key}"
                if key not in tree:
                    if spec.optional or state.relaxed:
                        continue
                    raise RequiredFieldMissingError(field_path)
                raw = tree[key]
                if raw is None:
                    if not (spec.optional or state.relaxed):
                        raise RequiredFieldNilError(field_path)
                    value = spec.kind.zero()
                else:
                    value = self._decode_value(raw, spec.kind, field_path, state)
                object.__setattr__(obj, spec.source_name, value)
            if logger.isEnabledFor(logging.DEBUG):
                unknown = set(tree) - schema.json_keys(naming)
                if unknown:
                    logger.debug(
                        "ignoring %d unknown key(s) for %s at %r: %s",
                        len(unknown),
                        cls.__qualname__,
                        path or "/",
                        sorted(unknown),
                    )
            return obj
        finally:
            state.leave(tree)

    def _decode_value(
        self, raw: Any, kind: FieldKind, path: str, state: Traversal
    ) -> Any:
        tag = kind.tag
        if tag is KindTag.STRING:
            if not isinstance(raw, str):
                raise TypeMismatchError(path, "string", describe(raw))
            return raw
        if tag is KindTag.NUMBER or tag is KindTag.BOOLEAN:
            if not isinstance(raw, (bool, int, float)):
                raise TypeMismatchError(path, kind.describe(), describe(raw))
            return decode_scalar(raw, kind, path)
        if tag is KindTag.DATE:
            return decode_date(raw, kind, path)
        if tag is KindTag.OBJECT:
            if not isinstance(raw, Mapping):
                raise TypeMismatchError(path, kind.describe(), describe(raw))
            assert kind.py_type is not None
            return self._decode_object(raw, kind.py_type, path, state)
        if tag is KindTag.LIST:
            if not isinstance(raw, list):
                raise TypeMismatchError(path, kind.describe(), describe(raw))
            return self._decode_items(enumerate(raw), raw, kind, path, state, [])
        if tag is KindTag.MAP:
            if not isinstance(raw, Mapping):
                raise TypeMismatchError(path, kind.describe(), describe(raw))
            return self._decode_items(raw.items(), raw, kind, path, state, {})
        return self._decode_any(raw, path, state)

    def _decode_items(
        self,
        items: Any,
        container: Any,
        kind: FieldKind,
        path: str,
        state: Traversal,
        out: Any,
    ) -> Any:
        element = kind.element
        assert element is not None
        state.enter(container, path)
        try:
            for key, raw in items:
                item_path = f"{path}/{key}"
                if raw is None:
                    if not state.relaxed and element.tag is not KindTag.ANY:
                        raise RequiredFieldNilError(item_path)
                    decoded = None
                else:
                    decoded = self._decode_value(raw, element, item_path, state)
                if isinstance(out, list):
                    out.append(decoded)
                else:
                    out[key] = decoded
            return out
        finally:
            state.leave(container)

    def _decode_any(self, raw: Any, path: str, state: Traversal) -> Any:
        """Deep-copy an untyped tree value."""
        if isinstance(raw, Mapping):
            return self._decode_items(
                raw.items(), raw, FieldKind(KindTag.MAP, element=_ANY), path, state, {}
            )
        if isinstance(raw, list):
            return self._decode_items(
                enumerate(raw), raw, FieldKind(KindTag.LIST, element=_ANY), path, state, []
            )
        if raw is None or isinstance(raw, (str, bool, int, float)):
            return raw
        raise TypeMismatchError(path, "JSON value", type(raw).__name__)

