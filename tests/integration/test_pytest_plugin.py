"""Integration tests for the json-coder pytest plugin.

These tests verify that the assert_json_round_trip fixture is auto-discovered
via the pytest11 entry point and behaves correctly.

NOTE: These tests require json-coder to be installed (even in editable mode
via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

import subprocess
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pytest
from sample_models import CamelRecord, Person, Team

from json_coder import CoderOptions, NamingConvention


def test_fixture_passes_round_trip(assert_json_round_trip: Any, team: Team) -> None:
    """A schema-complete object survives encode/decode unchanged."""
    assert_json_round_trip(team)


def test_fixture_returns_tree(assert_json_round_trip: Any, ann: Person) -> None:
    tree = assert_json_round_trip(ann)
    assert tree == {"name": "Ann", "birth_date": "2020-01-02"}


def test_fixture_custom_options(assert_json_round_trip: Any) -> None:
    """Options are forwarded to both directions."""
    tree = assert_json_round_trip(
        CamelRecord(first_name="Ann", account_id=3),
        CoderOptions(naming=NamingConvention.NO_MAPPING),
    )
    assert tree == {"first_name": "Ann", "account_id": 3}


def test_fixture_fails_lossy_round_trip(assert_json_round_trip: Any) -> None:
    """A datetime stored in a date-only field loses its time portion."""
    person = Person(name="Ann", birth_date=datetime(2020, 1, 2, 10, 30))
    with pytest.raises(AssertionError, match="does not survive a JSON round trip"):
        assert_json_round_trip(person)


def test_fixture_error_message_contents(assert_json_round_trip: Any) -> None:
    """AssertionError message should contain all diagnostic fields."""
    person = Person(name="Ann", birth_date=datetime(2020, 1, 2, 10, 30))
    with pytest.raises(AssertionError) as exc_info:
        assert_json_round_trip(person)

    error_message = str(exc_info.value)
    assert "original:" in error_message
    assert "tree:" in error_message
    assert "restored:" in error_message
    assert "changed:" in error_message
    assert "2020-01-02" in error_message


def test_fixture_returns_callable(assert_json_round_trip: Any) -> None:
    """The fixture should return a callable, not None or a direct assertion result."""
    assert callable(assert_json_round_trip), (
        "assert_json_round_trip fixture must return a callable, not a direct value"
    )


def test_fixture_propagates_mapping_errors(assert_json_round_trip: Any) -> None:
    """Objects that cannot be encoded raise the mapping error, not AssertionError."""
    from json_coder import RequiredFieldNilError

    with pytest.raises(RequiredFieldNilError):
        assert_json_round_trip(Person(name=None, birth_date=date(2020, 1, 2)))  # type: ignore[arg-type]


def test_plugin_discovery() -> None:
    """Verify assert_json_round_trip appears in pytest --fixtures output."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "--fixtures", "-q"],
        capture_output=True,
        text=True,
        cwd=str(Path(__file__).resolve().parents[2]),
    )
    assert "assert_json_round_trip" in result.stdout, (
        f"assert_json_round_trip not found in pytest --fixtures output.\n"
        f"stdout:\n{result.stdout}\n"
        f"stderr:\n{result.stderr}"
    )
