"""Result types for host-facing operations

Restore steps return a ``Result`` instead of raising, so the orchestration loop
can branch on the outcome and keep going with the rest of the worklist.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    """Failure categories of a restore."""

    MISSING_DEPENDENCY = "missing_dependency"
    ACTIVATION_FAILURE = "activation_failure"
    SPLIT_FAILURE = "split_failure"
    TAB_CREATION_FAILURE = "tab_creation_failure"


@dataclass
class Error:
    kind: ErrorKind
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception | None = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass
class Result(Generic[T]):
    success: bool
    value: T | None = None
    error: Error | None = None

    @staticmethod
    def ok(value: T) -> "Result[T]":
        return Result(success=True, value=value)

    @staticmethod
    def err(
        kind: ErrorKind,
        message: str,
        exc: Exception | None = None,
        **context,
    ) -> "Result[T]":
        return Result(
            success=False,
            error=Error(kind=kind, message=message, context=context, original_exception=exc),
        )

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success
