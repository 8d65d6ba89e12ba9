"""JSONTextCodec: default TextCodec on the standard library ``json`` module."""

from __future__ import annotations

import json
from dataclasses import dataclass

from json_coder.values import JsonValue

__all__ = ["JSONTextCodec"]


@dataclass(frozen=True, slots=True)
class JSONTextCodec:
    """Parses and serializes JSON text.

    Attributes:
        indent: Indentation passed to ``json.dumps``; None for a single line.
        sort_keys: Emit object keys sorted instead of in schema order.
        ensure_ascii: Escape non-ASCII characters.  Default False (UTF-8 text).
    """

    indent: int | None = None
    sort_keys: bool = False
    ensure_ascii: bool = False

    def parse(self, data: str | bytes) -> JsonValue:
        """Parse JSON text or UTF-8/16/32 bytes.

        Raises:
            json.JSONDecodeError: If ``data`` is not valid JSON.
        """
        return json.loads(data)

    def serialize(self, value: JsonValue) -> str:
        return json.dumps(
            value,
            indent=self.indent,
            sort_keys=self.sort_keys,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
        )
