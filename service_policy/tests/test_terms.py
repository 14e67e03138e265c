"""
Unit tests for the policy value model.
"""

import pytest

from shared.errors import KeyCollisionError, ProjectionError
from service_policy.app.values import (
    Array, Object, Set, Term,
    array_term, boolean_term, null_term, number_term, object_term, string_term,
    canonical_json, to_term, type_name,
)


class TestTerms:
    """Test cases for term construction and equality."""

    def test_structural_equality(self):
        """Test that equal data builds equal terms."""
        assert to_term({"a": [1, {"b": None}]}) == to_term({"a": [1, {"b": None}]})
        assert hash(to_term({"a": [1, 2]})) == hash(to_term({"a": [1, 2]}))

    def test_boolean_is_not_number(self):
        """Test that true and 1 are distinct terms."""
        assert to_term(True) != to_term(1)
        assert len(Set([to_term(True), to_term(1)])) == 2

    def test_integer_equals_float(self):
        """Test numeric equality across int and float."""
        assert to_term(1) == to_term(1.0)

    def test_composite_keys(self):
        """Test that objects and arrays can be object keys."""
        obj = Object([
            (to_term({"k": 1}), string_term("by-object")),
            (array_term(number_term(1), number_term(2)), string_term("by-array")),
        ])

        assert obj.get(to_term({"k": 1})) == string_term("by-object")
        assert obj.get(to_term([1, 2])) == string_term("by-array")
        assert obj.get(to_term([2, 1])) is None

    def test_duplicate_keys_collapse(self):
        """Test that structurally equal keys are stored once."""
        obj = Object([(to_term("a"), to_term(1)), (to_term("a"), to_term(2))])

        assert len(obj) == 1
        assert obj.get(to_term("a")) == to_term(2)

    def test_to_term_python_set(self):
        """Test that Python sets become set terms."""
        term = to_term({"x", "y"})

        assert isinstance(term.value, Set)
        assert string_term("x") in term.value

    def test_to_term_unsupported(self):
        """Test conversion of unsupported data."""
        with pytest.raises(TypeError):
            to_term(object())

    def test_to_python(self):
        """Test rendering back to plain data."""
        data = {"a": [1, "two", None, True], "b": {"c": 3.5}}

        assert to_term(data).to_python() == data

    def test_to_python_set_sorted(self):
        """Test that sets render as sorted lists."""
        assert to_term({3, 1, 2}).to_python() == [1, 2, 3]

    def test_to_python_non_string_key(self):
        """Test rendering of non-string object keys."""
        term = object_term((number_term(1), string_term("x")), (null_term(), boolean_term(False)))

        assert term.to_python() == {"1": "x", "null": False}

    def test_to_python_key_collision(self):
        """Test that a non-string key rendering onto a string key is refused."""
        term = object_term((string_term("1"), string_term("s")), (number_term(1), string_term("n")))

        with pytest.raises(KeyCollisionError) as exc_info:
            term.to_python()

        assert exc_info.value.key == "1"

    def test_to_python_set_array_key_collision(self):
        """Test that a set key and an array key with equal members collide."""
        term = Term(Object([
            (to_term([1]), string_term("array")),
            (to_term({1}), string_term("set")),
        ]))

        with pytest.raises(KeyCollisionError):
            term.to_python()

    def test_canonical_json(self):
        """Test deterministic JSON text."""
        assert canonical_json(to_term({"b": 1, "a": [True]})) == '{"a":[true],"b":1}'
        assert str(string_term("x")) == '"x"'

    def test_type_name(self):
        """Test policy type names."""
        assert type_name(null_term()) == "null"
        assert type_name(to_term(False)) == "boolean"
        assert type_name(to_term(1)) == "number"
        assert type_name(to_term("s")) == "string"
        assert type_name(to_term({})) == "object"
        assert type_name(to_term([])) == "array"
        assert type_name(to_term(set())) == "set"


class TestArray:
    """Test cases for Array."""

    def test_get(self):
        """Test index access with out-of-range handling."""
        arr = Array([to_term("a"), to_term("b")])

        assert arr.get(0) == to_term("a")
        assert arr.get(1) == to_term("b")
        assert arr.get(2) is None
        assert arr.get(-1) is None


class TestObjectMerge:
    """Test cases for Object.merge_with."""

    def test_merge_with_resolves_conflicts(self):
        """Test that conflicting keys go through the resolver."""
        a = to_term({"x": 1, "y": 2}).value
        b = to_term({"y": 20, "z": 30}).value

        merged = a.merge_with(b, lambda mine, theirs: mine)

        assert Term(merged).to_python() == {"x": 1, "y": 2, "z": 30}

    def test_merge_with_does_not_mutate(self):
        """Test that inputs are left untouched."""
        a = to_term({"x": 1}).value
        b = to_term({"x": 2, "y": 3}).value

        a.merge_with(b, lambda mine, theirs: theirs)

        assert Term(a).to_python() == {"x": 1}
        assert Term(b).to_python() == {"x": 2, "y": 3}


class TestObjectFilter:
    """Test cases for the projection primitive."""

    def test_null_spec_keeps_whole_value(self):
        """Test flat projection with null placeholders."""
        obj = to_term({"a": {"deep": [1, 2]}, "b": 2}).value
        spec = to_term({"a": None}).value

        assert Term(obj.filter(spec)).to_python() == {"a": {"deep": [1, 2]}}

    def test_nested_object_spec(self):
        """Test recursion into nested objects."""
        obj = to_term({"a": {"x": 1, "y": 2}, "b": 3}).value
        spec = to_term({"a": {"x": None}}).value

        assert Term(obj.filter(spec)).to_python() == {"a": {"x": 1}}

    def test_array_spec_uses_index_strings(self):
        """Test projection of arrays by decimal index keys."""
        obj = to_term({"a": ["p", "q", "r"]}).value
        spec = to_term({"a": {"0": None, "2": None}}).value

        assert Term(obj.filter(spec)).to_python() == {"a": ["p", "r"]}

    def test_set_spec(self):
        """Test projection of sets by member keys."""
        obj = Object([(to_term("s"), to_term({"m", "n"}))])
        spec = to_term({"s": {"m": None}}).value

        assert Term(obj.filter(spec)).to_python() == {"s": ["m"]}

    def test_scalar_under_object_spec_kept(self):
        """Test that scalars survive a nested spec."""
        obj = to_term({"a": 1}).value
        spec = to_term({"a": {"x": None}}).value

        assert Term(obj.filter(spec)).to_python() == {"a": 1}

    def test_invalid_spec(self):
        """Test that non-object specs are rejected."""
        obj = to_term({"a": 1}).value
        spec = to_term({"a": "bad"}).value

        with pytest.raises(ProjectionError) as exc_info:
            obj.filter(spec)

        assert exc_info.value.code == "PROJECTION_ERROR"
