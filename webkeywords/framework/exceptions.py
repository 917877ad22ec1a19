"""
Error types shared by the wait, acquisition, retry and execution layers.

Every failure that crosses a keyword boundary is a FrameworkError. The
``kind`` tag keeps the original category available to callers without a
deep exception hierarchy.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from .session import TRANSIENT_ERRORS


class ErrorKind(str, Enum):
    """Category of a framework failure."""

    VALIDATION = "validation"
    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    FATAL = "fatal"


class FrameworkError(Exception):
    """
    Single wrapping error raised by keywords.

    Attributes:
        message: Human-readable failure description
        cause: The underlying exception, if any
        kind: ErrorKind tag
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        kind: ErrorKind = ErrorKind.FATAL,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.kind = kind
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} (cause: {type(self.cause).__name__}: {self.cause})"

    @property
    def is_validation(self) -> bool:
        return self.kind == ErrorKind.VALIDATION

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        Returns:
            The deepest cause in the chain, or None
        """
        current = self.cause
        while isinstance(current, FrameworkError) and current.cause is not None:
            current = current.cause
        return current


class TimeoutExceeded(FrameworkError):
    """
    Raised when a polling wait reaches its deadline without success.

    Carries the last value returned by the predicate and the last ignored
    error so that callers can build "expected X but found Y" messages.
    """

    def __init__(
        self,
        message: str,
        description: str = "condition",
        timeout: float = 0.0,
        attempt_count: int = 0,
        elapsed_time: float = 0.0,
        last_value: Any = None,
        last_error: Optional[BaseException] = None,
        stage: Optional[str] = None,
    ):
        super().__init__(message, cause=last_error, kind=ErrorKind.TIMEOUT)
        self.description = description
        self.timeout = timeout
        self.attempt_count = attempt_count
        self.elapsed_time = elapsed_time
        self.last_value = last_value
        self.last_error = last_error
        self.stage = stage

    def __str__(self) -> str:
        details = [f"Attempts: {self.attempt_count}", f"Elapsed: {self.elapsed_time:.2f}s"]
        if self.last_error is not None:
            details.append(f"Last error: {type(self.last_error).__name__}: {self.last_error}")
        elif self.last_value is not None:
            details.append(f"Last value: {self.last_value!r}")
        if self.stage is not None:
            details.append(f"Stage: {self.stage}")
        return f"{self.message} [{', '.join(details)}]"


def validation_error(message: str) -> FrameworkError:
    """Build a FrameworkError describing caller misuse."""
    return FrameworkError(message, kind=ErrorKind.VALIDATION)


def kind_of(error: BaseException) -> ErrorKind:
    """
    ErrorKind for any exception.

    FrameworkErrors keep their tag; session "not ready yet" errors are
    TRANSIENT; everything else is FATAL.
    """
    if isinstance(error, FrameworkError):
        return error.kind
    if isinstance(error, TRANSIENT_ERRORS):
        return ErrorKind.TRANSIENT
    return ErrorKind.FATAL


def require_text(value: Optional[str], name: str) -> str:
    """
    Validate that a required string argument is present.

    Raises:
        FrameworkError: kind VALIDATION when value is None or blank
    """
    if value is None or not str(value).strip():
        raise validation_error(f"{name} cannot be null or empty")
    return value


__all__ = [
    "ErrorKind",
    "FrameworkError",
    "TimeoutExceeded",
    "validation_error",
    "kind_of",
    "require_text",
]
