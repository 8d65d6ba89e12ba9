"""SchemaRegistry: LRU-backed, thread-safe memo of TypeSchema per class.

Schemas are built on first use and shared afterwards.  A TypeSchema is
immutable once built, so readers never need to coordinate beyond the
lookup itself.  The lookup and the first build both happen under the
registry lock: concurrent first use of a type produces exactly one build.

LRU eviction is silent; an evicted type is rebuilt on its next use, and
the rebuilt schema is identical because building is deterministic.

Example::

    from json_coder.schema.registry import SchemaRegistry

    registry = SchemaRegistry(max_size=256)
    schema = registry.schema_for(Person)     # built
    schema = registry.schema_for(Person)     # served from memory
"""

from __future__ import annotations

import threading

from cachetools import LRUCache

from json_coder.schema.builder import build_schema
from json_coder.schema.fields import TypeSchema

__all__ = ["SchemaRegistry", "default_registry", "schema_for"]


class SchemaRegistry:
    """Process-wide cache of TypeSchema objects keyed by class.

    Each instance maintains its own ``LRUCache`` and lock; two registries
    never share entries.

    Args:
        max_size: Maximum number of schemas held in memory.  Defaults to 1024.
    """

    def __init__(self, max_size: int = 1024) -> None:
        self._cache: LRUCache[type, TypeSchema] = LRUCache(maxsize=max_size)
        # cachetools caches are not thread-safe; LRU reads reorder entries.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of schemas this registry can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of schemas stored in the registry."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def schema_for(self, cls: type) -> TypeSchema:
        """Return the schema of ``cls``, building it on first use.

        Raises:
            SchemaError: If ``cls`` cannot be described (not cached, so the
                error repeats on every call).
        """
        with self._lock:
            schema = self._cache.get(cls)
            if schema is None:
                schema = build_schema(cls)
                self._cache[cls] = schema
            return schema

    def __contains__(self, cls: object) -> bool:
        with self._lock:
            return cls in self._cache

    def clear(self) -> None:
        """Drop every cached schema."""
        with self._lock:
            self._cache.clear()


default_registry = SchemaRegistry()


def schema_for(cls: type) -> TypeSchema:
    """Return the schema of ``cls`` from the default registry."""
    return default_registry.schema_for(cls)
