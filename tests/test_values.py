"""Unit tests for value tree classification helpers."""

from __future__ import annotations

import pytest

from json_coder.values import JsonKind, describe, is_json_value, kind_of


class TestKindOf:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, JsonKind.NULL),
            (True, JsonKind.BOOLEAN),
            (False, JsonKind.BOOLEAN),
            (0, JsonKind.NUMBER),
            (2.5, JsonKind.NUMBER),
            ("", JsonKind.STRING),
            ([], JsonKind.ARRAY),
            ({}, JsonKind.OBJECT),
        ],
    )
    def test_classification(self, value: object, expected: JsonKind) -> None:
        assert kind_of(value) is expected

    def test_bool_is_not_a_number(self) -> None:
        """bool subclasses int but must classify as boolean."""
        assert kind_of(True) is not JsonKind.NUMBER

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(TypeError, match="Unsupported JSON value type"):
            kind_of(object())


class TestDescribe:
    def test_json_value_uses_kind_name(self) -> None:
        assert describe("x") == "string"
        assert describe({"a": 1}) == "object"

    def test_non_json_value_uses_type_name(self) -> None:
        assert describe(b"raw") == "bytes"


class TestIsJsonValue:
    def test_nested_tree(self) -> None:
        assert is_json_value({"a": [1, 2.5, None, {"b": True}], "c": "d"})

    def test_non_string_key_rejected(self) -> None:
        assert not is_json_value({1: "a"})

    def test_nested_foreign_value_rejected(self) -> None:
        assert not is_json_value({"a": [object()]})
