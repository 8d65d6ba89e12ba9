"""Schema subpackage: derived per-type field descriptions.

Re-exports the public API for the schema module:
- Marker, IGNORE, OPTIONAL, DATE_ONLY: per-field metadata for ``Annotated``
- FieldInfo: one member as reported by an introspection provider
- FieldKind, KindTag, FieldSpec, TypeSchema: the derived schema types
- SchemaBuilder, build_schema: derive a schema from a class
- SchemaRegistry, schema_for: cached, thread-safe schema lookup
"""

from json_coder.schema.builder import SchemaBuilder, build_schema
from json_coder.schema.fields import (
    DATE_ONLY,
    IGNORE,
    OPTIONAL,
    FieldInfo,
    FieldKind,
    FieldSpec,
    KindTag,
    Marker,
    TypeSchema,
)
from json_coder.schema.introspection import describe_fields, is_mappable
from json_coder.schema.registry import SchemaRegistry, default_registry, schema_for

__all__ = [
    "DATE_ONLY",
    "IGNORE",
    "OPTIONAL",
    "FieldInfo",
    "FieldKind",
    "FieldSpec",
    "KindTag",
    "Marker",
    "SchemaBuilder",
    "SchemaRegistry",
    "TypeSchema",
    "build_schema",
    "default_registry",
    "describe_fields",
    "is_mappable",
    "schema_for",
]
