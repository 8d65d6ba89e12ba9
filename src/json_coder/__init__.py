"""json-coder - schema-driven mapping between typed objects and JSON value trees."""

from __future__ import annotations

import logging

from json_coder.api import (
    clone,
    decode,
    decode_list,
    diff,
    encode,
    from_json,
    from_json_list,
    get_global_options,
    set_global_options,
    to_json,
    to_json_bytes,
)
from json_coder.coder import JSONCoder
from json_coder.config import CoderOptions, NamingConvention, reset_global_options
from json_coder.errors import (
    CyclicGraphError,
    DateFormatError,
    ExpectedObjectError,
    InternalInconsistencyError,
    MappingError,
    RequiredFieldMissingError,
    RequiredFieldNilError,
    SchemaAmbiguousElementError,
    SchemaError,
    TypeMismatchError,
)
from json_coder.mapper import Mapper
from json_coder.schema import DATE_ONLY, IGNORE, OPTIONAL, FieldInfo, Marker

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "DATE_ONLY",
    "IGNORE",
    "OPTIONAL",
    "CoderOptions",
    "CyclicGraphError",
    "DateFormatError",
    "ExpectedObjectError",
    "FieldInfo",
    "InternalInconsistencyError",
    "JSONCoder",
    "Mapper",
    "MappingError",
    "Marker",
    "NamingConvention",
    "RequiredFieldMissingError",
    "RequiredFieldNilError",
    "SchemaAmbiguousElementError",
    "SchemaError",
    "TypeMismatchError",
    "clone",
    "decode",
    "decode_list",
    "diff",
    "encode",
    "from_json",
    "from_json_list",
    "get_global_options",
    "reset_global_options",
    "set_global_options",
    "to_json",
    "to_json_bytes",
]
