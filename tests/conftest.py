"""Shared fixtures for the json-coder test suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

import pytest
from sample_models import Person, Team

from json_coder import reset_global_options


@pytest.fixture(autouse=True)
def _fresh_global_options() -> Iterator[None]:
    """Every test starts and ends with the start-up global options."""
    reset_global_options()
    yield
    reset_global_options()


@pytest.fixture
def ann() -> Person:
    return Person(name="Ann", birth_date=date(2020, 1, 2))


@pytest.fixture
def team(ann: Person) -> Team:
    return Team(
        name="core",
        lead=ann,
        members=[ann, Person(name="Bob", birth_date=date(1990, 5, 17), nickname="bobby")],
        scores={"q1": 3, "q2": 5},
    )
