"""JSONCoder: base class giving a type its JSON surface.

Derive a class from ``JSONCoder`` (usually also a dataclass), declare the
members that take part in JSON exchange as annotated attributes, then use
``from_dict`` / ``from_json`` to build instances and ``to_dict`` /
``to_json`` to encode them::

    @dataclass
    class Person(JSONCoder):
        name: str
        birth_date: date
        nickname: str | None = None
        cache: Annotated[dict, IGNORE] = field(default_factory=dict)

    Person.from_json('{"name": "Ann", "birth_date": "2020-01-02"}')

Only read-write members are mapped.  Members marked IGNORE, private
(``_name``) members, ``ClassVar`` attributes, read-only properties and
methods are left alone.  Every mapped member must be present (decode) and
non-None (encode) unless it is optional: ``T | None`` or
``Annotated[T, OPTIONAL]``.  Bare ``int``/``float``/``bool`` members are
always encoded; overriding ``field_is_optional`` makes them optional on
decode.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from json_coder import graph
from json_coder.config import CoderOptions, NamingConvention
from json_coder.mapper import Mapper
from json_coder.schema.fields import FieldInfo
from json_coder.schema.introspection import describe_fields
from json_coder.values import JsonValue

__all__ = ["JSONCoder"]


class JSONCoder:
    """Mixin providing encode/decode class and instance methods.

    Class attributes:
        encoder_naming: Naming override for encoding this type.  The default,
            USE_TYPE_DEFAULT, falls back to the global encoder options.
        decoder_naming: Naming override for decoding this type.
    """

    encoder_naming: ClassVar[NamingConvention] = NamingConvention.USE_TYPE_DEFAULT
    decoder_naming: ClassVar[NamingConvention] = NamingConvention.USE_TYPE_DEFAULT

    # ------------------------------------------------------------------
    # Introspection hooks
    # ------------------------------------------------------------------

    @classmethod
    def json_fields(cls) -> list[FieldInfo]:
        """Candidate members; defaults to the class's own annotations."""
        return describe_fields(cls)

    @classmethod
    def element_type_for(cls, field_name: str) -> Any:
        """Element annotation for a list or dict member, or None.

        Override for collections declared without a usable generic argument
        (a bare ``list``).  ``str`` and number elements can always be
        declared directly, e.g. ``list[str]``.
        """
        return None

    @classmethod
    def field_is_optional(cls, field_name: str) -> bool:
        """Return True to make ``field_name`` optional on decode."""
        return False

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def to_dict(self, options: CoderOptions | None = None) -> dict[str, Any]:
        return Mapper().encode(self, options)

    def to_json(self, options: CoderOptions | None = None) -> str:
        return Mapper().to_json(self, options)

    def to_json_bytes(self, options: CoderOptions | None = None) -> bytes:
        return Mapper().to_json_bytes(self, options)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, tree: JsonValue, options: CoderOptions | None = None) -> Self:
        return Mapper().decode(tree, cls, options)

    @classmethod
    def from_list(
        cls, trees: list[JsonValue], options: CoderOptions | None = None
    ) -> list[Self]:
        return Mapper().decode_list(trees, cls, options)

    @classmethod
    def from_json(cls, data: str | bytes, options: CoderOptions | None = None) -> Self:
        return Mapper().from_json(data, cls, options)

    @classmethod
    def from_json_list(
        cls, data: str | bytes, options: CoderOptions | None = None
    ) -> list[Self]:
        return Mapper().from_json_list(data, cls, options)

    # ------------------------------------------------------------------
    # Graph operations
    # ------------------------------------------------------------------

    def clone(self) -> Self:
        """Deep copy of the mapped members (encode, then decode)."""
        return graph.clone(self)

    def diff(self, other: Self) -> Self | None:
        """Members of ``other`` that differ from this object; None if equal."""
        return graph.diff(self, other)
