"""NameMapper: converts source field names to JSON keys and back.

Handles three naming conventions:
- SNAKE_CASE (e.g. "firstName" -> "first_name", "userID" -> "user_id")
- CAMEL_CASE (e.g. "first_name" -> "firstName")
- NO_MAPPING (names used unchanged)

Also handles the reserved-word escape: a leading "$" ("$class" -> "class")
or a PEP 8 trailing underscore on a keyword or builtin ("class_" -> "class").
The escape is removed before any convention is applied and never reaches
the JSON key.
"""

from __future__ import annotations

import builtins
import keyword
import re

from json_coder.config import NamingConvention

__all__ = ["NameMapper", "strip_escape", "to_json", "to_source"]

ESCAPE_PREFIX = "$"

# Compiled regex patterns (module-level, compiled once)

# Matches acronym runs: uppercase letters before an uppercase+lowercase pair
# e.g. "URLParser" -> "URL_Parser" via "\1_\2"
_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")

# Matches lowercase letter or digit followed by uppercase letter
# e.g. "firstName" -> "first_Name", "userID" -> "user_ID"
_LOWER_UPPER = re.compile(r"([a-z\d])([A-Z])")

# Matches an underscore run followed by the first character of the next segment
_SNAKE_SEGMENT = re.compile(r"_+([A-Za-z\d])")

_BUILTIN_NAMES = frozenset(dir(builtins))


def strip_escape(name: str) -> str:
    """Remove the reserved-word escape from a source name.

    ``"$class"`` and ``"class_"`` both give ``"class"``.  A trailing underscore
    is only treated as an escape when the remaining name is a Python keyword,
    soft keyword or builtin (``type_``, ``id_``, ``from_``).
    """
    if name.startswith(ESCAPE_PREFIX) and len(name) > 1:
        return name[1:]
    if name.endswith("_") and not name.endswith("__"):
        bare = name[:-1]
        if (
            keyword.iskeyword(bare)
            or keyword.issoftkeyword(bare)
            or bare in _BUILTIN_NAMES
        ):
            return bare
    return name


def _snake(name: str) -> str:
    s = _UPPER_RUN.sub(r"\1_\2", name)
    s = _LOWER_UPPER.sub(r"\1_\2", s)
    return s.lower()


def _camel(name: str) -> str:
    head, sep, tail = name.partition("_")
    if not sep:
        return name
    return head + _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), "_" + tail)


def to_json(name: str, convention: NamingConvention) -> str:
    """Return the JSON key for an escape-stripped source name.

    Unresolved conventions (USE_TYPE_DEFAULT) fall back to NO_MAPPING.
    """
    if convention is NamingConvention.SNAKE_CASE:
        return _snake(name)
    if convention is NamingConvention.CAMEL_CASE:
        return _camel(name)
    return name


def to_source(key: str, convention: NamingConvention) -> str:
    """Return the source-style name for a JSON key (inverse of ``to_json``).

    Under SNAKE_CASE the key is lower-camelled ("first_name" -> "firstName");
    under CAMEL_CASE it is snake-cased.  Other conventions return the key
    unchanged.
    """
    if convention is NamingConvention.SNAKE_CASE:
        return _camel(key)
    if convention is NamingConvention.CAMEL_CASE:
        return _snake(key)
    return key


class NameMapper:
    """Stateless name translator bound to one naming convention.

    Example usage:
        mapper = NameMapper(NamingConvention.SNAKE_CASE)
        mapper.to_json("firstName")     # "first_name"
        mapper.to_json("$class")        # "class"
        mapper.to_source("first_name")  # "firstName"
    """

    __slots__ = ("convention",)

    def __init__(self, convention: NamingConvention) -> None:
        self.convention = convention

    def to_json(self, source_name: str) -> str:
        """Strip the escape from ``source_name`` and apply the convention."""
        return to_json(strip_escape(source_name), self.convention)

    def to_source(self, key: str) -> str:
        return to_source(key, self.convention)
