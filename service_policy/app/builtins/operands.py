"""
Operand shape assertions shared by builtin implementations.
"""

from typing import Union

from shared.errors import OperandTypeError
from ..values import Object, String, Term, Value, type_name


def new_operand_type_err(position: int, got: Union[Value, Term], *expected: str) -> OperandTypeError:
    """Build a positioned type error for operand ``position`` (1-based)."""
    return OperandTypeError(position, type_name(got), expected)


def object_operand(value: Value, position: int) -> Object:
    if not isinstance(value, Object):
        raise new_operand_type_err(position, value, "object")
    return value


def string_operand(value: Value, position: int) -> str:
    if not isinstance(value, String):
        raise new_operand_type_err(position, value, "string")
    return value.value
