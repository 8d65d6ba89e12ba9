"""Tests for the JSONCoder base class surface."""

from __future__ import annotations

from datetime import date

import pytest
from sample_models import CamelRecord, Employee, Keyword, Roster, Tally

from json_coder import CoderOptions, JSONCoder, NamingConvention
from json_coder.errors import RequiredFieldMissingError
from json_coder.protocols import IntrospectionProvider


@pytest.fixture
def boss() -> Employee:
    return Employee(name="Ada", hired=date(2015, 6, 1), badge=1, skills=["lead"])


@pytest.fixture
def dev(boss: Employee) -> Employee:
    return Employee(name="Lin", hired=date(2020, 2, 3), badge=42, manager=boss, skills=["py"])


class TestHooks:
    def test_satisfies_introspection_protocol(self, dev: Employee) -> None:
        assert isinstance(dev, IntrospectionProvider)
        assert isinstance(Keyword(), IntrospectionProvider)

    def test_default_hooks(self) -> None:
        assert [info.name for info in Employee.json_fields()] == [
            "name",
            "hired",
            "badge",
            "manager",
            "skills",
        ]
        assert Employee.element_type_for("skills") is None
        assert Employee.field_is_optional("badge") is False

    def test_overridden_hooks(self) -> None:
        assert Tally.field_is_optional("count") is True
        assert Roster.element_type_for("ranks") is int

    def test_default_naming_defers(self) -> None:
        assert JSONCoder.encoder_naming is NamingConvention.USE_TYPE_DEFAULT
        assert CamelRecord.encoder_naming is NamingConvention.CAMEL_CASE


class TestEncoding:
    def test_to_dict(self, dev: Employee) -> None:
        assert dev.to_dict() == {
            "name": "Lin",
            "hired": "2020-02-03",
            "badge": 42,
            "manager": {"name": "Ada", "hired": "2015-06-01", "badge": 1, "skills": ["lead"]},
            "skills": ["py"],
        }

    def test_to_dict_with_options(self) -> None:
        tree = CamelRecord(first_name="Ann").to_dict(
            CoderOptions(naming=NamingConvention.NO_MAPPING)
        )
        assert tree == {"first_name": "Ann", "account_id": 0}

    def test_to_json_and_bytes(self) -> None:
        record = CamelRecord(first_name="Zoë")
        assert record.to_json() == '{"firstName": "Zoë", "accountId": 0}'
        assert record.to_json_bytes() == '{"firstName": "Zoë", "accountId": 0}'.encode()


class TestDecoding:
    def test_from_dict_round_trip(self, dev: Employee) -> None:
        assert Employee.from_dict(dev.to_dict()) == dev

    def test_from_dict_uses_type_naming(self) -> None:
        record = CamelRecord.from_dict({"firstName": "Ann", "accountId": 7})
        assert record == CamelRecord(first_name="Ann", account_id=7)

    def test_from_json_round_trip(self, dev: Employee) -> None:
        assert Employee.from_json(dev.to_json()) == dev

    def test_from_list(self, boss: Employee, dev: Employee) -> None:
        assert Employee.from_list([boss.to_dict(), dev.to_dict()]) == [boss, dev]

    def test_from_json_list(self, boss: Employee) -> None:
        assert Employee.from_json_list(f"[{boss.to_json()}]") == [boss]

    def test_missing_scalar(self) -> None:
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            Employee.from_dict({"name": "Lin", "hired": "2020-02-03"})
        assert exc_info.value.path == "/badge"


class TestGraphMethods:
    def test_clone(self, dev: Employee) -> None:
        copied = dev.clone()
        assert copied == dev
        assert copied.manager is not dev.manager

    def test_diff(self, dev: Employee) -> None:
        assert dev.diff(dev.clone()) is None
        promoted = dev.clone()
        promoted.badge = 7
        result = dev.diff(promoted)
        assert result is not None
        assert result.badge == 7
        assert result.name is None
