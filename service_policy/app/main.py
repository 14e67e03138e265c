"""
Policy builtins service.
"""

import time
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from shared.base_service import BaseService
from shared.errors import AccessLayerException, NestingTooDeepError, UnknownBuiltinError
from shared.logging import set_builtin_context

from .builtins import BuiltinRegistry, default_registry
from .models import BuiltinCallRequest, BuiltinCallResponse, BuiltinInfo, BuiltinListResponse
from .values import to_term


class PolicyService(BaseService):
    """Policy service exposing builtins over HTTP."""

    def __init__(self, registry: Optional[BuiltinRegistry] = None):
        self.registry = registry or default_registry
        super().__init__("policy", 8013)

        self._setup_policy_routes()

    def _setup_policy_routes(self):
        """Set up builtin routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "policy",
                "message": "Policy builtins service",
                "version": "1.0.0",
                "builtins": self.registry.names()
            }

        @self.app.get("/builtins", response_model=BuiltinListResponse)
        async def list_builtins():
            """List registered builtins."""
            builtins = [
                BuiltinInfo(name=decl.name, arity=decl.arity, description=decl.description)
                for decl in self.registry.declarations()
            ]
            return BuiltinListResponse(builtins=builtins, total=len(builtins))

        @self.app.post("/builtins/{name}", response_model=BuiltinCallResponse)
        async def call_builtin(name: str, request: Request):
            """Evaluate a builtin against JSON operands."""
            raw = await self._read_body(request)

            try:
                body = BuiltinCallRequest.model_validate_json(raw or b"{}")
            except PydanticValidationError as e:
                raise RequestValidationError(e.errors(include_url=False))

            return self.evaluate(name, body.operands)

    async def _read_body(self, request: Request) -> bytes:
        """Read the request body, refusing anything over ``max_operand_bytes``."""
        limit = self.config.max_operand_bytes

        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid Content-Length header")
            if declared < 0:
                raise HTTPException(status_code=400, detail="Invalid Content-Length header")
            if declared > limit:
                raise HTTPException(status_code=413, detail="Operands too large")

        # Chunked bodies carry no length; count while streaming
        body = bytearray()
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > limit:
                raise HTTPException(status_code=413, detail="Operands too large")

        return bytes(body)

    def evaluate(self, name: str, operands: list) -> BuiltinCallResponse:
        """Evaluate builtin ``name`` on plain JSON operands."""
        set_builtin_context(name)
        start_time = time.time()
        outcome = "ok"
        # Unregistered names share one label
        label = name if self.registry.declaration(name) is not None else "unknown"

        try:
            try:
                result = self.registry.evaluate(name, [to_term(op) for op in operands])
                rendered = result.to_python()
            except RecursionError:
                raise NestingTooDeepError()
        except AccessLayerException as e:
            outcome = e.code.lower()
            raise
        except Exception:
            outcome = "error"
            raise
        finally:
            duration = time.time() - start_time
            self.metrics.record_builtin_call(label, outcome, duration)
            self.logger.info(
                "Builtin evaluated",
                builtin=name,
                outcome=outcome,
                duration_ms=round(duration * 1000, 3)
            )

        return BuiltinCallResponse(builtin=name, result=rendered)

    def _status_for(self, exc: AccessLayerException) -> int:
        if isinstance(exc, UnknownBuiltinError):
            return 404
        return 400


def create_app():
    """Create policy service application."""
    service = PolicyService()
    return service.app


if __name__ == "__main__":
    service = PolicyService()
    service.run()
