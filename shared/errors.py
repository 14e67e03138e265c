"""
Shared error handling for the policy builtins service.
"""

from typing import Dict, Any, Optional, Sequence

from opentelemetry import trace
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for policy services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class OperandTypeError(AccessLayerException):
    """A builtin operand has the wrong shape."""

    def __init__(self, position: int, got: str, expected: Sequence[str]):
        self.position = position
        self.got = got
        self.expected = list(expected)

        if len(self.expected) == 1:
            message = f"operand {position} must be {self.expected[0]} but got {got}"
        else:
            message = f"operand {position} must be one of {{{', '.join(self.expected)}}} but got {got}"

        super().__init__(
            "OPERAND_TYPE_ERROR",
            message,
            {"position": position, "got": got, "expected": self.expected}
        )


class ProjectionError(AccessLayerException):
    """Invalid projection specification."""

    def __init__(self, message: str = "Invalid projection", details: Optional[Dict[str, Any]] = None):
        super().__init__("PROJECTION_ERROR", message, details)


class UnknownBuiltinError(AccessLayerException):
    """No builtin registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("UNKNOWN_BUILTIN", f"unknown builtin: {name}", {"builtin": name})


class ArityError(AccessLayerException):
    """Builtin called with the wrong number of operands."""

    def __init__(self, name: str, expected: int, actual: int):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            "ARITY_ERROR",
            f"{name}: expected {expected} operands but got {actual}",
            {"builtin": name, "expected": expected, "actual": actual}
        )


class KeyCollisionError(AccessLayerException):
    """Two distinct object keys render to the same JSON key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            "KEY_COLLISION",
            f"object keys collide when rendered as JSON: {key}",
            {"key": key}
        )


class NestingTooDeepError(AccessLayerException):
    """Value nesting exceeds what the evaluator can recurse through."""

    def __init__(self, message: str = "value nesting too deep"):
        super().__init__("NESTING_TOO_DEEP", message)
