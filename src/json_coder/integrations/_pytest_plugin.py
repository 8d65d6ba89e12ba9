"""pytest plugin for json-coder.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from json_coder import CoderOptions, decode, diff, encode


@pytest.fixture(scope="session")
def assert_json_round_trip() -> Any:
    """Fixture that returns a callable encode/decode round-trip asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to encode()/decode(), which create a fresh Mapper per call).

    Usage in tests::

        def test_person(assert_json_round_trip):
            assert_json_round_trip(Person(name="Ann", birth_date=date(2020, 1, 2)))

    Returns:
        A callable ``_assert(obj, options=None) -> dict`` that encodes ``obj``,
        decodes the tree back into ``type(obj)`` and raises ``AssertionError``
        when the result differs from ``obj``.  The encoded tree is returned so
        the caller can make further assertions on it.
    """

    def _assert(obj: Any, options: CoderOptions | None = None) -> dict[str, Any]:
        """Assert that ``obj`` survives an encode/decode round trip.

        Args:
            obj:     Instance of a mappable class.
            options: Options used for both directions.  Defaults to the
                     type override / global options of each direction.

        Raises:
            AssertionError: When the decoded object differs from ``obj``,
                with a message including the tree and the differing fields.
        """
        tree = encode(obj, options)
        restored = decode(tree, type(obj), options)
        changed = diff(obj, restored)
        if changed is not None:
            raise AssertionError(
                f"{type(obj).__qualname__} does not survive a JSON round trip\n"
                f"  original: {obj!r}\n"
                f"  tree:     {tree}\n"
                f"  restored: {restored!r}\n"
                f"  changed:  {encode(changed, CoderOptions(relax_requirements=True))}"
            )
        return tree

    return _assert
