"""
Builtin registration and dispatch for the policy evaluator.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from shared.errors import ArityError, UnknownBuiltinError
from shared.logging import get_logger
from ..values import Term

Iter = Callable[[Term], Any]
BuiltinFunc = Callable[[Sequence[Term], Iter], Any]


@dataclass(frozen=True)
class BuiltinDecl:
    """Declaration of a builtin: its name and fixed arity."""
    name: str
    arity: int
    description: Optional[str] = None


class BuiltinRegistry:
    """Registry of builtin functions callable from policy source."""

    def __init__(self):
        self.logger = get_logger("policy.builtins")
        self._decls: Dict[str, BuiltinDecl] = {}
        self._funcs: Dict[str, BuiltinFunc] = {}

    def register(self, decl: BuiltinDecl, func: BuiltinFunc) -> None:
        """Register a builtin; names must be unique."""
        if decl.name in self._funcs:
            raise ValueError(f"builtin already registered: {decl.name}")
        self._decls[decl.name] = decl
        self._funcs[decl.name] = func
        self.logger.debug("Builtin registered", builtin=decl.name, arity=decl.arity)

    def get(self, name: str) -> Optional[BuiltinFunc]:
        return self._funcs.get(name)

    def declaration(self, name: str) -> Optional[BuiltinDecl]:
        return self._decls.get(name)

    def names(self) -> List[str]:
        return sorted(self._decls)

    def declarations(self) -> List[BuiltinDecl]:
        return [self._decls[name] for name in self.names()]

    def call(self, name: str, operands: Sequence[Term], iter: Iter) -> Any:
        """Invoke builtin ``name`` with ``operands``, delivering results to ``iter``.

        Raises UnknownBuiltinError or ArityError before the builtin runs;
        errors raised by the builtin itself propagate unchanged.
        """
        decl = self._decls.get(name)
        if decl is None:
            self.logger.warning("Unknown builtin", builtin=name)
            raise UnknownBuiltinError(name)

        if len(operands) != decl.arity:
            self.logger.warning(
                "Builtin arity mismatch",
                builtin=name,
                expected=decl.arity,
                actual=len(operands)
            )
            raise ArityError(name, decl.arity, len(operands))

        return self._funcs[name](operands, iter)

    def evaluate(self, name: str, operands: Sequence[Term]) -> Term:
        """Call a builtin and return the single result it produced."""
        results: List[Term] = []
        self.call(name, operands, results.append)
        if len(results) != 1:
            raise RuntimeError(f"{name}: expected exactly one result, got {len(results)}")
        return results[0]


default_registry = BuiltinRegistry()


def register_builtin_func(name: str, arity: int, description: Optional[str] = None,
                          registry: Optional[BuiltinRegistry] = None):
    """Decorator registering a builtin implementation under ``name``."""
    def decorator(func: BuiltinFunc) -> BuiltinFunc:
        (registry or default_registry).register(BuiltinDecl(name, arity, description), func)
        return func
    return decorator
