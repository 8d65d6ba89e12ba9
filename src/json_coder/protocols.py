"""Structural protocols for the engine's two collaborators.

``IntrospectionProvider`` is the hook surface a mappable class may offer.
Any class with conformant ``json_fields``, ``element_type_for`` and
``field_is_optional`` callables passes ``isinstance`` checks; no
inheritance is required.  ``JSONCoder`` implements all three.

``TextCodec`` turns text into value trees and back.  The engine only uses
it at the text entry points (``from_json`` / ``to_json``).

Example::

    from json_coder.protocols import TextCodec

    class CompactCodec:
        def parse(self, data: str | bytes) -> JsonValue:
            return json.loads(data)

        def serialize(self, value: JsonValue) -> str:
            return json.dumps(value, separators=(",", ":"))

    assert isinstance(CompactCodec(), TextCodec)  # structural, no inheritance needed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from json_coder.schema.fields import FieldInfo
    from json_coder.values import JsonValue


@runtime_checkable
class IntrospectionProvider(Protocol):
    """Per-type field metadata hooks.

    - ``json_fields()`` lists the candidate members as ``FieldInfo`` tuples.
    - ``element_type_for(name)`` returns the element annotation of a
      collection field, or None to use the declared generic argument.
    - ``field_is_optional(name)`` marks additional fields optional; the only
      way to make a bare ``int``/``float``/``bool`` field optional on decode
      without touching its annotation.
    """

    def json_fields(self) -> list[FieldInfo]: ...

    def element_type_for(self, field_name: str) -> Any: ...

    def field_is_optional(self, field_name: str) -> bool: ...


@runtime_checkable
class TextCodec(Protocol):
    """Structural protocol for JSON text codecs."""

    def parse(self, data: str | bytes) -> JsonValue: ...

    def serialize(self, value: JsonValue) -> str: ...
