"""Exception hierarchy raised by the mapping engine.

Every engine call raises at most one error: the first failure met while
walking the schema fields in declaration order.  Each error carries the
JSON Pointer ``path`` (RFC 6901) of the offending member, e.g.
``"/friends/0/name"``; the root is ``""``.
"""

from __future__ import annotations

__all__ = [
    "CyclicGraphError",
    "DateFormatError",
    "ExpectedObjectError",
    "InternalInconsistencyError",
    "MappingError",
    "RequiredFieldMissingError",
    "RequiredFieldNilError",
    "SchemaAmbiguousElementError",
    "SchemaError",
    "TypeMismatchError",
]


class MappingError(Exception):
    """Base class for every error reported by json-coder.

    Attributes:
        path: JSON Pointer of the member that failed.  Empty for the root.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path

    @property
    def field(self) -> str:
        """Last segment of ``path`` (the field or element index that failed)."""
        return self.path.rsplit("/", 1)[-1]


class RequiredFieldMissingError(MappingError):
    """A required key is absent from the value tree being decoded."""

    def __init__(self, path: str) -> None:
        super().__init__(f"required field {path!r} is missing", path=path)


class RequiredFieldNilError(MappingError):
    """A required member holds ``None`` (on encode) or ``null`` (on decode)."""

    def __init__(self, path: str) -> None:
        super().__init__(f"required field {path!r} is nil", path=path)


class TypeMismatchError(MappingError, TypeError):
    """A value does not match the kind declared for its field."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"field {path!r}: expected {expected}, got {actual}", path=path
        )
        self.expected = expected
        self.actual = actual


class DateFormatError(MappingError, ValueError):
    """A date string is not in the ISO-8601 form the field requires."""

    def __init__(self, path: str, text: str, *, date_only: bool) -> None:
        form = "YYYY-MM-DD or ISO-8601 timestamp" if date_only else "ISO-8601 timestamp"
        super().__init__(
            f"field {path!r}: {text!r} is not a valid {form}", path=path
        )
        self.text = text


class ExpectedObjectError(MappingError, TypeError):
    """The root of a value tree handed to ``decode`` is not a JSON object."""

    def __init__(self, actual: str, *, path: str = "") -> None:
        super().__init__(f"expected a JSON object, got {actual}", path=path)
        self.actual = actual


class SchemaError(MappingError):
    """A type cannot be described as a mapping schema."""


class SchemaAmbiguousElementError(SchemaError):
    """A collection field has no resolvable element kind."""

    def __init__(self, owner: type, field_name: str, detail: str) -> None:
        super().__init__(
            f"{owner.__qualname__}.{field_name}: cannot infer collection element "
            f"kind ({detail}); override element_type_for()",
            path=f"/{field_name}",
        )
        self.owner = owner


class CyclicGraphError(MappingError):
    """An object graph re-enters itself or nests deeper than ``max_depth``."""


class InternalInconsistencyError(MappingError):
    """An object's own state contradicts its schema (raised by ``clone``)."""
