# src/narrative/core/results.py
"""
Typed operation results.

Engine services return an ``OperationResult`` instead of raising for expected
conditions (a rejected lifecycle transition, a missing record, a failed write).
Callers branch on ``result.ok``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class EngineErrorCode(str, Enum):
    """Reasons an engine operation can be rejected."""
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    WRITE_FAILED = "WRITE_FAILED"
    MARKER_INACTIVE = "MARKER_INACTIVE"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Success carries ``value``; failure carries ``error`` and ``message``."""
    ok: bool
    value: Optional[T] = None
    error: Optional[EngineErrorCode] = None
    message: str = ""

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: EngineErrorCode, message: str) -> "OperationResult[T]":
        return cls(ok=False, error=error, message=message)

    def __bool__(self) -> bool:
        return self.ok
