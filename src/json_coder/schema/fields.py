"""Schema data types: markers, FieldKind, FieldSpec and TypeSchema.

Provides the derived, immutable description of a mappable type that the
mapper walks on every encode and decode.  Instances are built once per type
by ``json_coder.schema.builder`` and shared by all threads afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import MISSING, dataclass, field
from enum import StrEnum, auto
from typing import Any, NamedTuple

from json_coder.config import Direction, NamingConvention
from json_coder.errors import SchemaError

__all__ = [
    "DATE_ONLY",
    "IGNORE",
    "OPTIONAL",
    "FieldInfo",
    "FieldKind",
    "FieldSpec",
    "KindTag",
    "Marker",
    "Slot",
    "TypeSchema",
]


class Marker(StrEnum):
    """Per-field metadata attached with ``typing.Annotated``.

    - IGNORE:    Field never takes part in JSON exchange.
    - OPTIONAL:  Field may be absent (decode) or nil (encode).
    - DATE_ONLY: Date field is written as ``YYYY-MM-DD``.
    """

    IGNORE = auto()
    OPTIONAL = auto()
    DATE_ONLY = auto()


IGNORE = Marker.IGNORE
OPTIONAL = Marker.OPTIONAL
DATE_ONLY = Marker.DATE_ONLY


class FieldInfo(NamedTuple):
    """One member as reported by an introspection provider."""

    name: str
    annotation: Any
    read_write: bool = True


class KindTag(StrEnum):
    """Declared kind of a field or collection element."""

    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    DATE = auto()
    OBJECT = auto()
    LIST = auto()
    MAP = auto()
    ANY = auto()


@dataclass(frozen=True, slots=True)
class FieldKind:
    """Resolved kind of a field, or of a collection element.

    Attributes:
        tag: Which kind this is (see KindTag).
        py_type: ``int``/``float`` for NUMBER, ``date``/``datetime`` for DATE,
            the mappable class for OBJECT; None otherwise.
        element: Element kind for LIST and MAP; None otherwise.
        date_only: DATE written as ``YYYY-MM-DD`` instead of a full timestamp.
        scalar: Bare ``int``/``float``/``bool``: non-nullable by construction,
            always emitted on encode.
    """

    tag: KindTag
    py_type: type | None = None
    element: FieldKind | None = None
    date_only: bool = False
    scalar: bool = False

    def describe(self) -> str:
        """Readable kind name used in error messages, e.g. ``list[Person]``."""
        if self.tag is KindTag.OBJECT and self.py_type is not None:
            return self.py_type.__qualname__
        if self.tag is KindTag.LIST and self.element is not None:
            return f"list[{self.element.describe()}]"
        if self.tag is KindTag.MAP and self.element is not None:
            return f"dict[str, {self.element.describe()}]"
        if self.tag is KindTag.DATE and self.date_only:
            return "date"
        return str(self.tag)

    def zero(self) -> Any:
        """Type default: 0 / 0.0 / False for scalars, None for the rest."""
        if self.scalar and self.py_type is not None:
            return self.py_type()
        return None


@dataclass(frozen=True, slots=True)
class Slot:
    """A non-mapped instance attribute that still needs an initial value."""

    name: str
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One active (mapped) field of a TypeSchema.

    Attributes:
        source_name: Attribute name on the Python object.
        base_name: ``source_name`` with the reserved-word escape removed.
        kind: Declared kind.
        optional: Field may be absent from the tree / nil on the object.
        json_names: JSON key per concrete naming convention, derived once.
        default: Declared default value, or ``dataclasses.MISSING``.
        default_factory: Declared default factory, or None.
        is_property: Field is backed by a property setter.
    """

    source_name: str
    base_name: str
    kind: FieldKind
    optional: bool
    json_names: Mapping[NamingConvention, str]
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None
    is_property: bool = False

    def json_name(self, convention: NamingConvention) -> str:
        return self.json_names.get(convention, self.base_name)

    @property
    def has_default(self) -> bool:
        return self.default_factory is not None or self.default is not MISSING

    def initial_value(self) -> Any:
        """Value a field holds when the tree does not provide one."""
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not MISSING:
            return self.default
        return self.kind.zero()


@dataclass(frozen=True, slots=True)
class TypeSchema:
    """Derived description of one mappable type.

    Attributes:
        type_ref: The described class.
        fields: Active fields in declaration order.
        ignored: Names of read-write fields excluded by the IGNORE marker.
        passive: Non-mapped attributes (ignored or private) with their defaults.
        encoder_naming: Type-level naming override for encode.
        decoder_naming: Type-level naming override for decode.
    """

    type_ref: type
    fields: tuple[FieldSpec, ...]
    ignored: tuple[str, ...] = ()
    passive: tuple[Slot, ...] = ()
    encoder_naming: NamingConvention = NamingConvention.USE_TYPE_DEFAULT
    decoder_naming: NamingConvention = NamingConvention.USE_TYPE_DEFAULT
    _by_name: dict[str, FieldSpec] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _clashes: dict[NamingConvention, str] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._by_name.update((spec.source_name, spec) for spec in self.fields)
        for convention in (
            NamingConvention.SNAKE_CASE,
            NamingConvention.CAMEL_CASE,
            NamingConvention.NO_MAPPING,
        ):
            owners: dict[str, str] = {}
            for spec in self.fields:
                key = spec.json_name(convention)
                if key in owners:
                    self._clashes[convention] = (
                        f"{self.type_ref.__qualname__}: fields {owners[key]!r} and "
                        f"{spec.source_name!r} both map to JSON key {key!r} "
                        f"under {convention}"
                    )
                    break
                owners[key] = spec.source_name

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, source_name: str) -> FieldSpec | None:
        return self._by_name.get(source_name)

    def naming_for(self, direction: Direction) -> NamingConvention:
        """Type-level naming override for ``direction``."""
        if direction is Direction.ENCODE:
            return self.encoder_naming
        return self.decoder_naming

    def check_keys(self, convention: NamingConvention, path: str = "") -> None:
        """Raise SchemaError if two fields share a JSON key under ``convention``."""
        clash = self._clashes.get(convention)
        if clash is not None:
            raise SchemaError(clash, path=path)

    def json_keys(self, convention: NamingConvention) -> set[str]:
        return {spec.json_name(convention) for spec in self.fields}

    def new_instance(self) -> Any:
        """Create an instance without running ``__init__``.

        Every attribute is set to its type default: declared defaults first,
        then the zero value of the kind (None for non-scalars).  Property
        fields without a declared default are left to their getter.
        """
        obj = self.type_ref.__new__(self.type_ref)
        for slot in self.passive:
            if slot.default_factory is not None:
                value = slot.default_factory()
            elif slot.default is not MISSING:
                value = slot.default
            else:
                value = None
            object.__setattr__(obj, slot.name, value)
        for spec in self.fields:
            if spec.is_property and not spec.has_default:
                continue
            object.__setattr__(obj, spec.source_name, spec.initial_value())
        return obj
