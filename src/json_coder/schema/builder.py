"""SchemaBuilder: derives a TypeSchema from a class's field metadata.

Uses recursive dispatch over type hints to resolve each member's declared
kind.  ``Annotated`` metadata carries the IGNORE / OPTIONAL / DATE_ONLY
markers; ``T | None`` marks a field optional.  The dispatch order matters:
``bool`` is checked before ``int`` (bool subclasses int) and ``datetime``
before ``date`` (datetime subclasses date).

The class itself may provide three hooks (see ``IntrospectionProvider``):
``json_fields()``, ``element_type_for(name)`` and ``field_is_optional(name)``.
Classes without hooks (plain dataclasses) use ``describe_fields``.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable
from dataclasses import MISSING
from datetime import date, datetime
from typing import Annotated, Any, Union, get_args, get_origin

from json_coder.config import NamingConvention
from json_coder.errors import SchemaAmbiguousElementError, SchemaError
from json_coder.naming import strip_escape, to_json
from json_coder.schema.fields import (
    FieldInfo,
    FieldKind,
    FieldSpec,
    KindTag,
    Marker,
    Slot,
    TypeSchema,
)
from json_coder.schema.introspection import (
    declared_defaults,
    describe_fields,
    is_mappable,
)

__all__ = ["SchemaBuilder", "build_schema"]

logger = logging.getLogger(__name__)

_CONCRETE_CONVENTIONS = (
    NamingConvention.SNAKE_CASE,
    NamingConvention.CAMEL_CASE,
    NamingConvention.NO_MAPPING,
)

_ANY_KIND = FieldKind(tag=KindTag.ANY)


def _unwrap(annotation: Any) -> tuple[Any, frozenset[Marker], bool]:
    """Split an annotation into (base type, markers, nullable)."""
    markers: set[Marker] = set()
    nullable = False
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            base, *metadata = get_args(annotation)
            markers.update(m for m in metadata if isinstance(m, Marker))
            annotation = base
            continue
        if origin is Union or origin is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            if len(args) != len(get_args(annotation)):
                nullable = True
            if len(args) == 1:
                annotation = args[0]
                continue
        return annotation, frozenset(markers), nullable


class SchemaBuilder:
    """Converts one class's field metadata into a TypeSchema.

    Example::
        schema = SchemaBuilder(Person).build()
        [spec.source_name for spec in schema]   # ["name", "birth_date", ...]
    """

    def __init__(self, cls: type) -> None:
        self._cls = cls
        self._element_hook: Callable[[str], Any] | None = getattr(
            cls, "element_type_for", None
        )
        self._optional_hook: Callable[[str], bool] | None = getattr(
            cls, "field_is_optional", None
        )

    def build(self) -> TypeSchema:
        """Build the schema.

        Raises:
            SchemaError: If a member's annotation is not a supported kind.
            SchemaAmbiguousElementError: If a list member has no element kind.
        """
        cls = self._cls
        fields_hook = getattr(cls, "json_fields", None)
        infos: list[FieldInfo] = (
            list(fields_hook()) if callable(fields_hook) else describe_fields(cls)
        )
        defaults = declared_defaults(cls)

        specs: list[FieldSpec] = []
        ignored: list[str] = []
        for info in infos:
            if not info.read_write:
                continue
            base, markers, nullable = _unwrap(info.annotation)
            if Marker.IGNORE in markers:
                ignored.append(info.name)
                continue
            specs.append(self._field(info, base, markers, nullable, defaults))

        active = {spec.source_name for spec in specs}
        passive = tuple(
            Slot(name, default, factory)
            for name, (default, factory) in defaults.items()
            if name not in active
        )
        schema = TypeSchema(
            type_ref=cls,
            fields=tuple(specs),
            ignored=tuple(ignored),
            passive=passive,
            encoder_naming=NamingConvention(
                getattr(cls, "encoder_naming", NamingConvention.USE_TYPE_DEFAULT)
            ),
            decoder_naming=NamingConvention(
                getattr(cls, "decoder_naming", NamingConvention.USE_TYPE_DEFAULT)
            ),
        )
        logger.debug(
            "built schema for %s: %d fields, %d ignored",
            cls.__qualname__,
            len(specs),
            len(ignored),
        )
        return schema

    # ------------------------------------------------------------------
    # Field resolution
    # ------------------------------------------------------------------

    def _field(
        self,
        info: FieldInfo,
        base: Any,
        markers: frozenset[Marker],
        nullable: bool,
        defaults: dict[str, tuple[Any, Callable[[], Any] | None]],
    ) -> FieldSpec:
        kind = self._kind(info.name, base, markers, nullable=nullable)
        optional = nullable or Marker.OPTIONAL in markers
        if not optional and self._optional_hook is not None:
            optional = bool(self._optional_hook(info.name))

        base_name = strip_escape(info.name)
        default, factory = defaults.get(info.name, (MISSING, None))
        return FieldSpec(
            source_name=info.name,
            base_name=base_name,
            kind=kind,
            optional=optional,
            json_names={c: to_json(base_name, c) for c in _CONCRETE_CONVENTIONS},
            default=default,
            default_factory=factory,
            is_property=isinstance(getattr(self._cls, info.name, None), property),
        )

    def _kind(
        self,
        name: str,
        tp: Any,
        markers: frozenset[Marker] = frozenset(),
        *,
        nullable: bool = False,
    ) -> FieldKind:
        """Resolve the declared kind of field ``name`` from its base type."""
        date_only = Marker.DATE_ONLY in markers
        # CRITICAL: bool MUST be checked before int, datetime before date
        if tp is bool:
            return FieldKind(tag=KindTag.BOOLEAN, py_type=bool, scalar=not nullable)
        if tp is int or tp is float:
            return FieldKind(tag=KindTag.NUMBER, py_type=tp, scalar=not nullable)
        if tp is str:
            return FieldKind(tag=KindTag.STRING, py_type=str)
        if tp is datetime:
            return FieldKind(tag=KindTag.DATE, py_type=datetime, date_only=date_only)
        if tp is date:
            return FieldKind(tag=KindTag.DATE, py_type=date, date_only=True)
        if tp is Any:
            return _ANY_KIND

        origin = get_origin(tp) or tp
        if origin is list:
            return FieldKind(tag=KindTag.LIST, element=self._list_element(name, tp))
        if origin is dict:
            return FieldKind(tag=KindTag.MAP, element=self._map_element(name, tp))
        if is_mappable(tp):
            return FieldKind(tag=KindTag.OBJECT, py_type=tp)
        msg = f"{self._cls.__qualname__}.{name}: unsupported field type {tp!r}"
        raise SchemaError(msg, path=f"/{name}")

    def _element_override(self, name: str) -> Any:
        if self._element_hook is None:
            return None
        return self._element_hook(name)

    def _element_kind(self, name: str, annotation: Any) -> FieldKind:
        base, markers, _ = _unwrap(annotation)
        return self._kind(name, base, markers, nullable=True)

    def _list_element(self, name: str, tp: Any) -> FieldKind:
        override = self._element_override(name)
        if override is not None:
            return self._element_kind(name, override)
        args = get_args(tp)
        if not args or args[0] is Any:
            raise SchemaAmbiguousElementError(self._cls, name, "no element type")
        try:
            return self._element_kind(name, args[0])
        except SchemaError as exc:
            raise SchemaAmbiguousElementError(
                self._cls, name, f"unsupported element type {args[0]!r}"
            ) from exc

    def _map_element(self, name: str, tp: Any) -> FieldKind:
        override = self._element_override(name)
        if override is not None:
            return self._element_kind(name, override)
        args = get_args(tp)
        if not args:
            return _ANY_KIND
        if args[0] is not str:
            msg = f"{self._cls.__qualname__}.{name}: map keys must be str, got {args[0]!r}"
            raise SchemaError(msg, path=f"/{name}")
        return self._element_kind(name, args[1])


def build_schema(cls: type) -> TypeSchema:
    """Build the TypeSchema of ``cls`` (uncached; see ``SchemaRegistry``)."""
    if not isinstance(cls, type):
        msg = f"expected a class, got {cls!r}"
        raise SchemaError(msg)
    return SchemaBuilder(cls).build()
