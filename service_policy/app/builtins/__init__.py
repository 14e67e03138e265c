"""
Builtins package.

Native functions callable from policy source under a fixed name and arity.

Modules of interest:
- registry: Builtin declarations, registration and dispatch.
- operands: Operand shape assertions raising positioned type errors.
- objects: The object.* builtins (union, remove, filter, get, lookup).

Importing this package registers every builtin on ``default_registry``.
"""

from . import objects  # noqa: F401
from .registry import (
    BuiltinDecl,
    BuiltinRegistry,
    default_registry,
    register_builtin_func,
)

__all__ = ["BuiltinDecl", "BuiltinRegistry", "default_registry", "register_builtin_func"]
