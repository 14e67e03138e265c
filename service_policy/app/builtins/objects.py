"""
Object builtins: union, remove, filter, get and lookup.

Each builtin receives its operands as terms and hands exactly one result
to ``iter``. Operand shape problems raise ``OperandTypeError``.
"""

import re
from typing import Optional, Sequence

from ..values import Array, Object, Set, Term, null_term, string_term
from .operands import new_operand_type_err, object_operand, string_operand
from .registry import Iter, register_builtin_func

_INDEX_RE = re.compile(r"[+-]?[0-9]+")


@register_builtin_func("object.union", 2, "Deep merge of two objects; the right-hand side wins on conflicts.")
def builtin_object_union(operands: Sequence[Term], iter: Iter):
    obj_a = object_operand(operands[0].value, 1)
    obj_b = object_operand(operands[1].value, 2)

    return iter(Term(merge_with_overwrite(obj_a, obj_b)))


@register_builtin_func("object.remove", 2, "Object without the given keys.")
def builtin_object_remove(operands: Sequence[Term], iter: Iter):
    obj = object_operand(operands[0].value, 1)
    keys_to_remove = get_object_keys_param(operands[1].value)

    result = Object((key, value) for key, value in obj.items() if key not in keys_to_remove)

    return iter(Term(result))


@register_builtin_func("object.filter", 2, "Object restricted to the given keys.")
def builtin_object_filter(operands: Sequence[Term], iter: Iter):
    obj = object_operand(operands[0].value, 1)
    keys = get_object_keys_param(operands[1].value)

    # Flat projection spec; null keeps the whole value under each key
    filter_obj = Object((key, null_term()) for key in keys)

    return iter(Term(obj.filter(filter_obj)))


@register_builtin_func("object.get", 3, "Value stored under a key, or a default.")
def builtin_object_get(operands: Sequence[Term], iter: Iter):
    obj = object_operand(operands[0].value, 1)

    found = obj.get(operands[1])
    if found is not None:
        return iter(found)

    return iter(operands[2])


@register_builtin_func("object.lookup", 3, "Value at a dotted path, or a default.")
def builtin_object_lookup(operands: Sequence[Term], iter: Iter):
    path = string_operand(operands[1].value, 2)

    found = lookup_path(operands[0], path)
    if found is None:
        return iter(operands[2])

    return iter(found)


def lookup_path(root: Term, path: str) -> Optional[Term]:
    """Walk ``root`` along the ``.``-separated ``path``.

    Object segments are string keys and array segments are indexes. Returns
    None as soon as a segment cannot be resolved.
    """
    current: Optional[Term] = root

    for part in path.split("."):
        if current is None:
            break

        value = current.value
        if isinstance(value, Object):
            current = value.get(string_term(part))

        elif isinstance(value, Array):
            idx = to_index(value, part)
            # idx == len(value) passes here and misses on the fetch below
            if idx is None or idx < 0 or idx > len(value):
                current = None
            else:
                current = value.get(idx)

        else:
            # over-reaching path into a scalar or set
            current = None

    return current


def to_index(arr: Array, part: str) -> Optional[int]:
    """Parse a path segment as an array index.

    ``-`` names the position just past the last element.
    """
    if part == "-":
        return len(arr)
    if not _INDEX_RE.fullmatch(part):
        return None
    return int(part)


def get_object_keys_param(array_or_set) -> Set:
    """Normalize an array, set or object operand into a set of keys."""
    if isinstance(array_or_set, (Array, Set)):
        return Set(array_or_set)
    if isinstance(array_or_set, Object):
        return Set(array_or_set.keys())

    raise new_operand_type_err(2, array_or_set, "object", "set", "array")


def merge_with_overwrite(obj_a: Object, obj_b: Object) -> Object:
    """Recursively merge ``obj_b`` into ``obj_a``.

    Nested objects present on both sides are merged; any other conflict is
    resolved in favour of ``obj_b``.
    Recursion follows the shared nesting of both objects, so depth is
    bounded only by the interpreter recursion limit.
    """
    def resolve(original: Term, update: Term) -> Term:
        if not isinstance(original.value, Object) or not isinstance(update.value, Object):
            return update
        return Term(merge_with_overwrite(original.value, update.value))

    return obj_a.merge_with(obj_b, resolve)
