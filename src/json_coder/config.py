"""CoderOptions, NamingConvention and the process-wide default options.

CoderOptions is a frozen (immutable) dataclass holding the per-call encode
or decode options.  The process-wide defaults are an immutable
(encoder, decoder) pair that is swapped atomically under a lock, so a
concurrent reader sees either the old pair or the new one, never a mix.

The effective options of a call are resolved by ``resolve_options`` in
three levels: explicit argument, then the type's own override, then the
process-wide default.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import StrEnum, auto

__all__ = [
    "CoderOptions",
    "Direction",
    "NamingConvention",
    "get_global_options",
    "reset_global_options",
    "resolve_options",
    "set_global_options",
]

logger = logging.getLogger(__name__)


class NamingConvention(StrEnum):
    """How source field names are turned into JSON keys.

    - SNAKE_CASE:       ``firstName`` -> ``first_name`` (global default on start up).
    - CAMEL_CASE:       ``first_name`` -> ``firstName``.
    - NO_MAPPING:       Names are used as they are.
    - USE_TYPE_DEFAULT: Defer to the type's override, else the global default.
    """

    SNAKE_CASE = auto()
    CAMEL_CASE = auto()
    NO_MAPPING = auto()
    USE_TYPE_DEFAULT = auto()


class Direction(StrEnum):
    """Which way a call converts: object -> tree (ENCODE) or tree -> object."""

    ENCODE = auto()
    DECODE = auto()


@dataclass(frozen=True, slots=True)
class CoderOptions:
    """Immutable options for one encode or decode call.

    Attributes:
        naming: Naming convention for JSON keys.  USE_TYPE_DEFAULT defers to
            the type-level override and then to the global default.
        relax_requirements: When True, missing or nil required fields are
            tolerated and left at their type default.  Used by ``clone``.
        max_depth: Maximum nesting of mappable objects and collections before
            the traversal gives up with ``CyclicGraphError`` (>= 1).
    """

    naming: NamingConvention = NamingConvention.USE_TYPE_DEFAULT
    relax_requirements: bool = False
    max_depth: int = 128

    def __post_init__(self) -> None:
        if not isinstance(self.naming, NamingConvention):
            try:
                object.__setattr__(self, "naming", NamingConvention(self.naming))
            except ValueError:
                msg = f"naming must be a NamingConvention, got {self.naming!r}"
                raise ValueError(msg) from None
        if self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)


_STARTUP_OPTIONS = CoderOptions(naming=NamingConvention.SNAKE_CASE)


class _GlobalOptions:
    """Holder for the process-wide (encoder, decoder) defaults."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pair: tuple[CoderOptions, CoderOptions] = (
            _STARTUP_OPTIONS,
            _STARTUP_OPTIONS,
        )

    def get(self) -> tuple[CoderOptions, CoderOptions]:
        # A single reference read of an immutable tuple.
        return self._pair

    def set(
        self,
        encoder: CoderOptions | None,
        decoder: CoderOptions | None,
    ) -> None:
        for options in (encoder, decoder):
            if options is not None and options.naming is NamingConvention.USE_TYPE_DEFAULT:
                msg = "global options need a concrete naming convention, got use_type_default"
                raise ValueError(msg)
        with self._lock:
            current_encoder, current_decoder = self._pair
            self._pair = (
                encoder if encoder is not None else current_encoder,
                decoder if decoder is not None else current_decoder,
            )
            new_pair = self._pair
        logger.info(
            "global options updated: encoder=%s decoder=%s",
            new_pair[0].naming,
            new_pair[1].naming,
        )


_globals = _GlobalOptions()


def get_global_options() -> tuple[CoderOptions, CoderOptions]:
    """Return the process-wide ``(encoder_options, decoder_options)`` pair."""
    return _globals.get()


def set_global_options(
    encoder: CoderOptions | None = None,
    decoder: CoderOptions | None = None,
) -> None:
    """Replace the process-wide default encoder and/or decoder options.

    Args:
        encoder: New default for encode calls.  None keeps the current one.
        decoder: New default for decode calls.  None keeps the current one.

    Raises:
        ValueError: If either options object uses ``USE_TYPE_DEFAULT`` naming.
    """
    _globals.set(encoder, decoder)


def reset_global_options() -> None:
    """Restore the start-up defaults (SNAKE_CASE in both directions)."""
    _globals.set(_STARTUP_OPTIONS, _STARTUP_OPTIONS)


def resolve_options(
    type_naming: NamingConvention,
    options: CoderOptions | None,
    direction: Direction,
) -> CoderOptions:
    """Return the effective options of a top-level call.

    Naming is taken from the first level that is not USE_TYPE_DEFAULT:
    the explicit ``options``, the type-level override ``type_naming`` (the
    schema's ``encoder_naming`` or ``decoder_naming``), the global default.
    The remaining fields come from ``options`` when given, else from the
    global default.
    """
    encoder, decoder = get_global_options()
    fallback = encoder if direction is Direction.ENCODE else decoder
    base = options if options is not None else fallback

    naming = (
        options.naming if options is not None else NamingConvention.USE_TYPE_DEFAULT
    )
    if naming is NamingConvention.USE_TYPE_DEFAULT:
        naming = type_naming
    if naming is NamingConvention.USE_TYPE_DEFAULT:
        naming = fallback.naming
    if naming is base.naming:
        return base
    return replace(base, naming=naming)
