"""
Policy Service package.

Exposes the object builtins used by the policy evaluator and serves them
over HTTP for diagnostics and integration. It provides:

- app.values: Immutable JSON-like value model (terms, objects, arrays, sets).
- app.builtins: Builtin registry and the object.* builtins.
- app.main: API surface for listing and calling builtins, plus health.

Guidelines:
- Builtins are pure; they never mutate their operands.
- The service is stateless; every call builds its values from the request.
"""
