"""
Engine-level exceptions.

The engine recovers locally from missing numerics and isolates per-source
storage failures, so the only error it raises upward is a total failure of
every source feeding one computation.
"""

from __future__ import annotations


class InsightEngineError(Exception):
    """Base class for errors raised by the insight engine."""


class AllSourcesFailedError(InsightEngineError):
    """Every storage query behind a computation failed.

    Attributes:
        operation: Name of the engine operation that failed.
        errors:    Source name → error message for each failed source.
    """

    def __init__(self, operation: str, errors: dict[str, str]) -> None:
        self.operation = operation
        self.errors = dict(errors)
        detail = "; ".join(f"{name}: {msg}" for name, msg in self.errors.items())
        super().__init__(f"All sources failed for {operation}: {detail}")
