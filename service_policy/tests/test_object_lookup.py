"""
Unit tests for object.lookup.
"""

import pytest

from shared.errors import OperandTypeError
from service_policy.app.builtins import default_registry
from service_policy.app.builtins.objects import lookup_path, to_index
from service_policy.app.values import Array, Object, Term, to_term


def lookup(obj, path, fallback):
    """Evaluate object.lookup on plain data."""
    result = default_registry.evaluate("object.lookup", [to_term(obj), to_term(path), to_term(fallback)])
    return result.to_python()


class TestObjectLookup:
    """Test cases for object.lookup."""

    @pytest.mark.parametrize("note,obj,path,fallback,expected", [
        ("basic case found", {"a": "b"}, "a", "c", "b"),
        ("basic case not found", {"a": "b"}, "c", "c", "c"),
        ("complex value found", {"a": {"b": "c"}}, "a", True, {"b": "c"}),
        ("complex value not found", {"a": {"b": "c"}}, "b", True, True),
        ("exact path", {"a": {"b": "x"}}, "a.b", True, "x"),
        ("over-reaching path", {"a": {"b": "x"}}, "a.b.c.d", True, True),
        ("found with index", {"a": [{"b": ["x"]}]}, "a.0.b.0", True, "x"),
        ("bad path", {"a": {"b": "x"}}, "b.c", True, True),
        ("bad over-reaching path", {"a": {"b": "x"}}, "b.c.x.y.z", True, True),
        ("lookup into empty object", {}, "b.c", True, True),
    ])
    def test_lookup(self, note, obj, path, fallback, expected):
        """Test path resolution against nested objects and arrays."""
        assert lookup(obj, path, fallback) == expected

    @pytest.mark.parametrize("path", ["a.2", "a.-", "a.-1", "a.x", "a.1.5", "a. 0", "a.1e0"])
    def test_array_index_misses(self, path):
        """Test that bad or out-of-range indexes fall back."""
        assert lookup({"a": ["p", "q"]}, path, "fallback") == "fallback"

    def test_array_index_last_element(self):
        """Test access to the last element."""
        assert lookup({"a": ["p", "q"]}, "a.1", "fallback") == "q"

    def test_array_index_with_sign_and_padding(self):
        """Test that signed and zero-padded indexes parse."""
        assert lookup({"a": ["p", "q"]}, "a.+0", "fallback") == "p"
        assert lookup({"a": ["p", "q"]}, "a.01", "fallback") == "q"

    def test_array_root(self):
        """Test that the root may be an array."""
        assert lookup([["x", "y"]], "0.1", "fallback") == "y"

    def test_scalar_root(self):
        """Test that a scalar root misses on any segment."""
        assert lookup("text", "a", "fallback") == "fallback"

    def test_set_is_not_indexable(self):
        """Test that sets are treated like scalars."""
        assert lookup({"s": {"x"}}, "s.x", "fallback") == "fallback"

    def test_empty_path(self):
        """Test that the empty path looks up the empty key."""
        assert lookup({"": 1}, "", "fallback") == 1
        assert lookup({"a": 1}, "", "fallback") == "fallback"

    def test_empty_segment(self):
        """Test consecutive dots yielding an empty key."""
        assert lookup({"a": {"": {"b": 2}}}, "a..b", "fallback") == 2

    def test_stored_null_returned(self):
        """Test that a reached null is a value, not a miss."""
        assert lookup({"a": None}, "a", "fallback") is None

    def test_descending_through_null_misses(self):
        """Test that indexing into null falls back."""
        assert lookup({"a": None}, "a.b", "fallback") == "fallback"

    def test_non_string_keys_not_matched(self):
        """Test that segments only match string keys."""
        obj = Term(Object([(to_term(1), to_term("one"))]))

        result = default_registry.evaluate("object.lookup", [obj, to_term("1"), to_term("fallback")])

        assert result == to_term("fallback")

    def test_found_term_identity(self):
        """Test that the reached term is returned as stored."""
        root = to_term({"a": [{"b": {"c": 1}}]})

        found = lookup_path(root, "a.0.b")

        assert found is root.value.get(to_term("a")).value.get(0).value.get(to_term("b"))

    def test_miss_returns_none(self):
        """Test the raw resolver reporting a miss."""
        assert lookup_path(to_term({"a": 1}), "a.b") is None

    def test_path_must_be_string(self):
        """Test operand type error on the path operand."""
        with pytest.raises(OperandTypeError) as exc_info:
            lookup({"a": 1}, 1, "fallback")

        assert exc_info.value.position == 2
        assert str(exc_info.value) == "operand 2 must be string but got number"


class TestToIndex:
    """Test cases for path segment index parsing."""

    @pytest.fixture
    def arr(self):
        return Array([to_term("a"), to_term("b"), to_term("c")])

    def test_digits(self, arr):
        assert to_index(arr, "2") == 2

    def test_negative(self, arr):
        assert to_index(arr, "-1") == -1

    def test_dash_is_length(self, arr):
        assert to_index(arr, "-") == 3

    @pytest.mark.parametrize("part", ["", "x", "1.0", "1e2", " 1", "1\n", "٣"])
    def test_invalid(self, arr, part):
        assert to_index(arr, part) is None
