"""Tests for Mapper.encode: object graph -> value tree.

Tests cover:
- The Person example (date-only field, omitted optional field)
- Naming conventions and the reserved-word escape
- Required/optional rules, scalar zero values and relaxed mode
- Nested objects, lists, maps and untyped values
- Type mismatches with JSON Pointer paths
- Cycle and depth guards
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from sample_models import (
    Annotations,
    CamelRecord,
    Contact,
    Document,
    Flags,
    IntReading,
    Keyword,
    Node,
    Person,
    SnakeClash,
    Team,
    Wallet,
)

from json_coder import CoderOptions, Mapper, NamingConvention, set_global_options
from json_coder.errors import (
    CyclicGraphError,
    RequiredFieldNilError,
    SchemaError,
    TypeMismatchError,
)

SNAKE = CoderOptions(naming=NamingConvention.SNAKE_CASE)
CAMEL = CoderOptions(naming=NamingConvention.CAMEL_CASE)
NO_MAPPING = CoderOptions(naming=NamingConvention.NO_MAPPING)


@pytest.fixture
def mapper() -> Mapper:
    return Mapper()


# ---------------------------------------------------------------------------
# Basics
# ---------------------------------------------------------------------------


class TestPersonExample:
    def test_encode_omits_absent_optional(self, mapper: Mapper, ann: Person) -> None:
        assert mapper.encode(ann, SNAKE) == {"name": "Ann", "birth_date": "2020-01-02"}

    def test_default_options_are_snake_case(self, mapper: Mapper, ann: Person) -> None:
        assert mapper.encode(ann) == {"name": "Ann", "birth_date": "2020-01-02"}

    def test_present_optional_emitted(self, mapper: Mapper) -> None:
        person = Person(name="Bob", birth_date=date(1990, 5, 17), nickname="bobby")
        assert mapper.encode(person)["nickname"] == "bobby"

    def test_key_order_follows_schema(self, mapper: Mapper) -> None:
        person = Person(name="Bob", birth_date=date(1990, 5, 17), nickname="bobby")
        assert list(mapper.encode(person)) == ["name", "birth_date", "nickname"]


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestNaming:
    def test_snake_case_key(self, mapper: Mapper) -> None:
        tree = mapper.encode(Contact(firstName="Ann"), SNAKE)
        assert tree == {"first_name": "Ann"}

    def test_no_mapping_key(self, mapper: Mapper) -> None:
        tree = mapper.encode(Contact(firstName="Ann"), NO_MAPPING)
        assert tree == {"firstName": "Ann"}

    def test_camel_case_key(self, mapper: Mapper, ann: Person) -> None:
        assert "birthDate" in mapper.encode(ann, CAMEL)

    def test_dollar_escape(self, mapper: Mapper) -> None:
        tree = mapper.encode(Keyword("Widget", "w"), NO_MAPPING)
        assert tree == {"class": "Widget", "label": "w"}

    def test_trailing_underscore_escape(self, mapper: Mapper) -> None:
        tree = mapper.encode(Annotations(title="t", class_="c"))
        assert tree["class"] == "c"
        assert "class_" not in tree

    def test_type_override_beats_global(self, mapper: Mapper) -> None:
        tree = mapper.encode(CamelRecord(first_name="Ann", account_id=7))
        assert tree == {"firstName": "Ann", "accountId": 7}

    def test_explicit_beats_type_override(self, mapper: Mapper) -> None:
        tree = mapper.encode(CamelRecord(first_name="Ann"), SNAKE)
        assert tree == {"first_name": "Ann", "account_id": 0}

    def test_global_default_applies(self, mapper: Mapper, ann: Person) -> None:
        set_global_options(encoder=CAMEL)
        assert mapper.encode(ann) == {"name": "Ann", "birthDate": "2020-01-02"}

    def test_naming_applies_to_nested_objects(self, mapper: Mapper, team: Team) -> None:
        tree = mapper.encode(team, CAMEL)
        assert "birthDate" in tree["lead"]
        assert "birthDate" in tree["members"][1]

    def test_key_clash_under_active_convention(self, mapper: Mapper) -> None:
        with pytest.raises(SchemaError, match="JSON key 'user_id'"):
            mapper.encode(SnakeClash(userID="a", user_id="b"))

    def test_key_clash_absent_under_other_convention(self, mapper: Mapper) -> None:
        tree = mapper.encode(SnakeClash(userID="a", user_id="b"), CAMEL)
        assert tree == {"userID": "a", "userId": "b"}


# ---------------------------------------------------------------------------
# Required / optional
# ---------------------------------------------------------------------------


class TestRequirements:
    def test_nil_required_field_raises(self, mapper: Mapper) -> None:
        person = Person(name=None, birth_date=date(2020, 1, 2))  # type: ignore[arg-type]
        with pytest.raises(RequiredFieldNilError) as exc_info:
            mapper.encode(person)
        assert exc_info.value.path == "/name"
        assert exc_info.value.field == "name"

    def test_nil_nested_required_field_path(self, mapper: Mapper, ann: Person) -> None:
        team = Team(name="t", lead=Person(name="L", birth_date=None))  # type: ignore[arg-type]
        with pytest.raises(RequiredFieldNilError) as exc_info:
            mapper.encode(team)
        assert exc_info.value.path == "/lead/birth_date"

    def test_relaxed_emits_null(self, mapper: Mapper) -> None:
        person = Person(name=None, birth_date=date(2020, 1, 2))  # type: ignore[arg-type]
        tree = mapper.encode(person, CoderOptions(relax_requirements=True))
        assert tree == {"name": None, "birth_date": "2020-01-02"}

    def test_scalars_always_emitted(self, mapper: Mapper) -> None:
        tree = mapper.encode(Flags(enabled=False))
        assert tree == {"enabled": False, "retries": 3, "ratio": 0.5}

    def test_nil_scalar_encodes_zero(self, mapper: Mapper) -> None:
        flags = Flags(enabled=None, retries=None, ratio=None)  # type: ignore[arg-type]
        assert mapper.encode(flags) == {"enabled": False, "retries": 0, "ratio": 0.0}

    def test_nil_list_element_raises(self, mapper: Mapper, ann: Person) -> None:
        team = Team(name="t", lead=ann, members=[ann, None])  # type: ignore[list-item]
        with pytest.raises(RequiredFieldNilError) as exc_info:
            mapper.encode(team)
        assert exc_info.value.path == "/members/1"

    def test_property_field_encoded(self, mapper: Mapper) -> None:
        assert mapper.encode(Wallet("Ann", 1234)) == {"owner": "Ann", "balance": 12.34}


# ---------------------------------------------------------------------------
# Nested, collections, untyped
# ---------------------------------------------------------------------------


class TestNested:
    def test_team(self, mapper: Mapper, team: Team) -> None:
        team.founded = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        assert mapper.encode(team) == {
            "name": "core",
            "lead": {"name": "Ann", "birth_date": "2020-01-02"},
            "members": [
                {"name": "Ann", "birth_date": "2020-01-02"},
                {"name": "Bob", "birth_date": "1990-05-17", "nickname": "bobby"},
            ],
            "founded": "2021-03-04T05:06:07+00:00",
            "scores": {"q1": 3, "q2": 5},
        }

    def test_shared_object_is_not_a_cycle(self, mapper: Mapper, ann: Person) -> None:
        team = Team(name="t", lead=ann, members=[ann, ann])
        assert len(mapper.encode(team)["members"]) == 2

    def test_untyped_values_copied(self, mapper: Mapper, ann: Person) -> None:
        doc = Document(
            title="d",
            metadata={"a": [1, "two", None, {"b": False}]},
            tags=["x"],
            attachment=ann,
        )
        tree = mapper.encode(doc)
        assert tree["metadata"] == {"a": [1, "two", None, {"b": False}]}
        assert tree["attachment"] == {"name": "Ann", "birth_date": "2020-01-02"}

    def test_untyped_foreign_value_raises(self, mapper: Mapper) -> None:
        doc = Document(title="d", metadata={"when": {1, 2}})
        with pytest.raises(TypeMismatchError) as exc_info:
            mapper.encode(doc)
        assert exc_info.value.path == "/metadata/when"


# ---------------------------------------------------------------------------
# Mismatches
# ---------------------------------------------------------------------------


class TestMismatch:
    def test_string_field_holding_number(self, mapper: Mapper) -> None:
        with pytest.raises(TypeMismatchError) as exc_info:
            mapper.encode(Contact(firstName=42))  # type: ignore[arg-type]
        assert exc_info.value.path == "/first_name"
        assert exc_info.value.expected == "string"
        assert exc_info.value.actual == "int"

    def test_number_field_holding_string(self, mapper: Mapper) -> None:
        with pytest.raises(TypeMismatchError):
            mapper.encode(IntReading(value="3"))  # type: ignore[arg-type]

    def test_object_field_holding_other_type(self, mapper: Mapper) -> None:
        team = Team(name="t", lead={"name": "Ann"})  # type: ignore[arg-type]
        with pytest.raises(TypeMismatchError) as exc_info:
            mapper.encode(team)
        assert exc_info.value.expected == "Person"

    def test_list_field_holding_string(self, mapper: Mapper, ann: Person) -> None:
        team = Team(name="t", lead=ann, members="nobody")  # type: ignore[arg-type]
        with pytest.raises(TypeMismatchError) as exc_info:
            mapper.encode(team)
        assert exc_info.value.path == "/members"

    def test_map_with_non_string_key(self, mapper: Mapper, ann: Person) -> None:
        team = Team(name="t", lead=ann, scores={1: 2})  # type: ignore[dict-item]
        with pytest.raises(TypeMismatchError):
            mapper.encode(team)

    def test_type_mismatch_is_type_error(self, mapper: Mapper) -> None:
        with pytest.raises(TypeError):
            mapper.encode(Contact(firstName=42))  # type: ignore[arg-type]

    def test_unmappable_object(self, mapper: Mapper) -> None:
        with pytest.raises(SchemaError, match="not a mappable type"):
            mapper.encode({"name": "Ann"})


# ---------------------------------------------------------------------------
# Cycles
# ---------------------------------------------------------------------------


class TestCycles:
    def test_self_reference(self, mapper: Mapper) -> None:
        node = Node(name="a")
        node.next = node
        with pytest.raises(CyclicGraphError) as exc_info:
            mapper.encode(node)
        assert exc_info.value.path == "/next"

    def test_longer_cycle(self, mapper: Mapper) -> None:
        a, b, c = Node(name="a"), Node(name="b"), Node(name="c")
        a.next, b.next, c.next = b, c, a
        with pytest.raises(CyclicGraphError):
            mapper.encode(a)

    def test_cycle_through_list(self, mapper: Mapper) -> None:
        doc = Document(title="d")
        doc.metadata["self"] = [doc]
        with pytest.raises(CyclicGraphError):
            mapper.encode(doc)

    def test_depth_guard(self, mapper: Mapper) -> None:
        head = Node(name="0")
        tail = head
        for i in range(1, 10):
            tail.next = Node(name=str(i))
            tail = tail.next
        assert mapper.encode(head)["next"]["next"]["name"] == "2"
        with pytest.raises(CyclicGraphError, match="max_depth=5"):
            mapper.encode(head, CoderOptions(max_depth=5))
