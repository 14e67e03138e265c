"""
Request and response models for the Policy Service.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class BuiltinCallRequest(BaseModel):
    """Request model for a builtin call."""
    operands: List[Any] = Field(default_factory=list, description="Operands as JSON values")


class BuiltinCallResponse(BaseModel):
    """Response model for a builtin call."""
    builtin: str = Field(..., description="Builtin name")
    result: Any = Field(None, description="Result as a JSON value")


class BuiltinInfo(BaseModel):
    """Declaration of a registered builtin."""
    name: str
    arity: int
    description: Optional[str] = None


class BuiltinListResponse(BaseModel):
    """Response model for the builtin listing."""
    builtins: List[BuiltinInfo]
    total: int
