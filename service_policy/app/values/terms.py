"""
Immutable JSON-like value model used by policy builtins.

Every value is wrapped in a ``Term``. Terms compare structurally and are
hashable, so any term (including objects and arrays) can be used as an
object key or a set member.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple, Union

from shared.errors import KeyCollisionError, ProjectionError


@dataclass(frozen=True)
class Null:
    """JSON null."""


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class Number:
    value: Union[int, float]


@dataclass(frozen=True)
class String:
    value: str


class Array:
    """Ordered, immutable sequence of terms."""

    __slots__ = ("_elems", "_hash")

    def __init__(self, elems: Iterable["Term"] = ()):
        self._elems: Tuple[Term, ...] = tuple(elems)
        self._hash: Optional[int] = None

    def get(self, index: int) -> Optional["Term"]:
        """Element at ``index`` or None when out of range."""
        if 0 <= index < len(self._elems):
            return self._elems[index]
        return None

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator["Term"]:
        return iter(self._elems)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Array) and self._elems == other._elems

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash((Array, self._elems))
        return self._hash

    def __repr__(self) -> str:
        return f"Array({list(self._elems)!r})"


class Set:
    """Unordered collection of unique terms."""

    __slots__ = ("_members", "_hash")

    def __init__(self, members: Iterable["Term"] = ()):
        self._members = frozenset(members)
        self._hash: Optional[int] = None

    def __contains__(self, term: object) -> bool:
        return term in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator["Term"]:
        return iter(self._members)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Set) and self._members == other._members

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash((Set, self._members))
        return self._hash

    def __repr__(self) -> str:
        return f"Set({sorted(self._members, key=canonical_json)!r})"


class Object:
    """Immutable mapping from term to term.

    Keys are unique under structural equality. Insertion order is kept for
    stable rendering but carries no meaning.
    """

    __slots__ = ("_items", "_hash")

    def __init__(self, items: Iterable[Tuple["Term", "Term"]] = ()):
        if isinstance(items, dict):
            items = items.items()
        self._items: Dict[Term, Term] = dict(items)
        self._hash: Optional[int] = None

    def get(self, key: "Term") -> Optional["Term"]:
        return self._items.get(key)

    def keys(self) -> Iterator["Term"]:
        return iter(self._items.keys())

    def items(self) -> Iterator[Tuple["Term", "Term"]]:
        return iter(self._items.items())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator["Term"]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Object) and self._items == other._items

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash((Object, frozenset(self._items.items())))
        return self._hash

    def __repr__(self) -> str:
        return f"Object({self._items!r})"

    def merge_with(self, other: "Object", resolve: Callable[["Term", "Term"], "Term"]) -> "Object":
        """Union of both objects.

        Keys present on both sides are passed to ``resolve(mine, theirs)``,
        whose return value is stored. Neither input is modified.
        """
        merged = dict(self._items)
        for key, value in other.items():
            existing = merged.get(key)
            merged[key] = value if existing is None else resolve(existing, value)
        return Object(merged)

    def filter(self, spec: "Object") -> "Object":
        """Project this object onto ``spec``.

        A spec value of null keeps the whole value under that key; an object
        spec value recurses into it.
        """
        return _project(self, spec)


Value = Union[Null, Boolean, Number, String, Object, Array, Set]


@dataclass(frozen=True)
class Term:
    """Immutable, structurally comparable wrapper around a value."""

    value: Value

    def to_python(self) -> Any:
        return to_python(self.value)

    def __str__(self) -> str:
        return canonical_json(self)


def _project(value: Value, spec: Value) -> Value:
    if isinstance(spec, Null):
        return value
    if not isinstance(spec, Object):
        raise ProjectionError(
            f"invalid filter value {canonical_json(spec)}, expected an object",
            {"filter": type_name(spec)}
        )

    if isinstance(value, (Null, Boolean, Number, String)):
        return value

    if isinstance(value, Array):
        elems = []
        for i, elem in enumerate(value):
            sub_spec = spec.get(string_term(str(i)))
            if sub_spec is not None:
                elems.append(Term(_project(elem.value, sub_spec.value)))
        return Array(elems)

    if isinstance(value, Set):
        members = []
        for member in value:
            sub_spec = spec.get(member)
            if sub_spec is not None:
                members.append(Term(_project(member.value, sub_spec.value)))
        return Set(members)

    items = []
    for key, elem in value.items():
        sub_spec = spec.get(key)
        if sub_spec is not None:
            items.append((key, Term(_project(elem.value, sub_spec.value))))
    return Object(items)


_TYPE_NAMES = {
    Null: "null",
    Boolean: "boolean",
    Number: "number",
    String: "string",
    Object: "object",
    Array: "array",
    Set: "set",
}


def type_name(value: Union[Value, Term]) -> str:
    """Policy-language type name of a value (``object``, ``array``, ...)."""
    if isinstance(value, Term):
        value = value.value
    return _TYPE_NAMES[type(value)]


NULL = Null()


def null_term() -> Term:
    return Term(NULL)


def boolean_term(value: bool) -> Term:
    return Term(Boolean(value))


def number_term(value: Union[int, float]) -> Term:
    return Term(Number(value))


def string_term(value: str) -> Term:
    return Term(String(value))


def array_term(*elems: Term) -> Term:
    return Term(Array(elems))


def set_term(*members: Term) -> Term:
    return Term(Set(members))


def object_term(*items: Tuple[Term, Term]) -> Term:
    return Term(Object(items))


def to_term(data: Any) -> Term:
    """Build a term from plain Python data (JSON types, tuples and sets).

    Conversion recurses per nesting level and is bounded by the interpreter
    recursion limit.
    """
    if isinstance(data, Term):
        return data
    if data is None:
        return null_term()
    if isinstance(data, bool):
        return boolean_term(data)
    if isinstance(data, (int, float)):
        return number_term(data)
    if isinstance(data, str):
        return string_term(data)
    if isinstance(data, dict):
        return Term(Object((to_term(k), to_term(v)) for k, v in data.items()))
    if isinstance(data, (list, tuple)):
        return Term(Array(to_term(e) for e in data))
    if isinstance(data, (set, frozenset)):
        return Term(Set(to_term(e) for e in data))
    raise TypeError(f"cannot convert {type(data).__name__} to a term")


def to_python(value: Union[Value, Term]) -> Any:
    """Render a value as plain JSON-compatible Python data.

    Non-string object keys are rendered as their canonical JSON text and
    sets become lists sorted by canonical JSON text. A non-string key whose
    text equals another key of the same object (``1`` next to ``"1"``, or a set
    next to an array with the same members) raises KeyCollisionError.

    Rendering recurses once per nesting level, so values nested deeper than
    the interpreter recursion limit raise RecursionError.
    """
    if isinstance(value, Term):
        value = value.value
    if isinstance(value, Null):
        return None
    if isinstance(value, (Boolean, Number, String)):
        return value.value
    if isinstance(value, Array):
        return [to_python(e) for e in value]
    if isinstance(value, Set):
        return [to_python(m) for m in sorted(value, key=canonical_json)]
    result = {}
    for key, elem in value.items():
        rendered = key.value.value if isinstance(key.value, String) else canonical_json(key)
        if rendered in result:
            raise KeyCollisionError(rendered)
        result[rendered] = to_python(elem)
    return result


def canonical_json(value: Union[Value, Term]) -> str:
    """Deterministic JSON text for a value."""
    return json.dumps(to_python(value), sort_keys=True, separators=(",", ":"))
