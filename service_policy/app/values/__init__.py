"""
Value model package.

Immutable, hashable JSON-like values (null, boolean, number, string,
object, array, set) wrapped in ``Term``, plus conversion to and from plain
Python data and the object projection primitive used by ``object.filter``.
"""

from .terms import (
    NULL,
    Array,
    Boolean,
    Null,
    Number,
    Object,
    Set,
    String,
    Term,
    Value,
    array_term,
    boolean_term,
    canonical_json,
    null_term,
    number_term,
    object_term,
    set_term,
    string_term,
    to_python,
    to_term,
    type_name,
)

__all__ = [
    "NULL",
    "Array",
    "Boolean",
    "Null",
    "Number",
    "Object",
    "Set",
    "String",
    "Term",
    "Value",
    "array_term",
    "boolean_term",
    "canonical_json",
    "null_term",
    "number_term",
    "object_term",
    "set_term",
    "string_term",
    "to_python",
    "to_term",
    "type_name",
]
