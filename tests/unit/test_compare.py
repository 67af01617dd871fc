"""Tests for expectly.assertions.compare."""

from collections import OrderedDict
from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel

from expectly.assertions.compare import deep_equal


@dataclass
class Node:
    name: str
    children: list = field(default_factory=list)


class User(BaseModel):
    name: str
    tags: list[str] = []


class Plain:
    def __init__(self, value):
        self.value = value


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self, a, b):
        self.a = a
        self.b = b


class TestScalars:
    @pytest.mark.parametrize("value", [0, 1.5, "text", b"raw", True, None, (1, 2), frozenset({1})])
    def test_reflexive(self, value):
        assert deep_equal(value, value)

    def test_types_must_match(self):
        assert not deep_equal(1, 1.0)
        assert not deep_equal(True, 1)
        assert not deep_equal("1", 1)
        assert not deep_equal([1], (1,))

    def test_none_only_equals_none(self):
        assert deep_equal(None, None)
        assert not deep_equal(None, 0)
        assert not deep_equal([], None)

    def test_same_nan_object_is_equal_but_distinct_nans_are_not(self):
        nan = float("nan")
        assert deep_equal(nan, nan)
        assert not deep_equal([float("nan")], [float("nan")])


class TestContainers:
    def test_nested_structures(self):
        a = {"users": [{"id": 1, "roles": ["admin"]}], "total": 1}
        b = {"users": [{"id": 1, "roles": ["admin"]}], "total": 1}
        assert deep_equal(a, b)

    def test_nested_type_mismatch(self):
        assert not deep_equal({"total": 1}, {"total": 1.0})
        assert not deep_equal([[1, 2]], [(1, 2)])

    def test_missing_and_extra_keys(self):
        assert not deep_equal({"a": 1}, {"b": 1})
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})

    def test_list_order_matters(self):
        assert not deep_equal([1, 2], [2, 1])

    def test_sets_compare_by_membership(self):
        assert deep_equal({1, 2, 3}, {3, 2, 1})
        assert not deep_equal({1, 2}, {1, 2, 3})

    @pytest.mark.parametrize(
        "a, b",
        [
            ({1: "a"}, {True: "a"}),
            ({1: "a"}, {1.0: "a"}),
            ({(1, "x"): 0}, {(1.0, "x"): 0}),
        ],
    )
    def test_mapping_keys_are_strict(self, a, b):
        assert not deep_equal(a, b)
        assert not deep_equal(b, a)

    @pytest.mark.parametrize(
        "a, b",
        [
            ({1}, {True}),
            (frozenset({1}), frozenset({1.0})),
            ({1, 2}, {1, 2.0}),
            ({(0, "x")}, {(False, "x")}),
        ],
    )
    def test_set_members_are_strict(self, a, b):
        assert not deep_equal(a, b)
        assert not deep_equal(b, a)

    def test_equal_keys_and_members_still_match(self):
        assert deep_equal({1: "a", (2, "b"): [3]}, {(2, "b"): [3], 1: "a"})
        assert deep_equal(frozenset({1, "x", (2,)}), frozenset({(2,), "x", 1}))

    def test_dict_subclass_must_match_exactly(self):
        assert not deep_equal(OrderedDict(a=1), {"a": 1})

    def test_cyclic_structures_terminate(self):
        a: list = [1]
        a.append(a)
        b: list = [1]
        b.append(b)
        assert deep_equal(a, b)


class TestObjects:
    def test_dataclasses_compare_field_by_field(self):
        assert deep_equal(Node("root", [Node("leaf")]), Node("root", [Node("leaf")]))
        assert not deep_equal(Node("root", [Node("leaf")]), Node("root", [Node("other")]))

    def test_dataclass_fields_are_strict(self):
        assert not deep_equal(Node("n", [1]), Node("n", [1.0]))

    def test_pydantic_models(self):
        assert deep_equal(User(name="ada", tags=["x"]), User(name="ada", tags=["x"]))
        assert not deep_equal(User(name="ada"), User(name="bob"))

    def test_plain_objects_compare_attributes(self):
        assert deep_equal(Plain([1, 2]), Plain([1, 2]))
        assert not deep_equal(Plain(1), Plain(2))

    def test_slotted_objects_compare_slots(self):
        assert deep_equal(Slotted(1, "x"), Slotted(1, "x"))
        assert not deep_equal(Slotted(1, "x"), Slotted(1, "y"))

    def test_functions_compare_by_identity(self):
        def f():
            return 1

        def g():
            return 1

        assert deep_equal(f, f)
        assert not deep_equal(f, g)
