"""
================================================================================
Action Execution
================================================================================

One dispatcher turns "an operation that may fail" into one of three
caller-visible behaviors:

    HARD    start/success/failure events; failures raise FrameworkError
    SOFT    start/success events; failures return a negative result
    SILENT  no events; failures raise FrameworkError

Validation errors (caller misuse) always raise, whatever the channel.

Usage:
    value = execute(
        lambda: finder.find_element(xpath, VISIBLE, timeout=5).text,
        FailureChannel.HARD,
        Diagnostics("Get text", "Welcome banner"),
        reporter,
    )

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

import allure
from loguru import logger

from .exceptions import FrameworkError, TimeoutExceeded, kind_of
from .reporting import ActionReporter


T = TypeVar("T")


class FailureChannel(str, Enum):
    """How an operation's failure reaches the caller."""

    HARD = "hard"
    SOFT = "soft"
    SILENT = "silent"


@dataclass(frozen=True)
class Diagnostics:
    """
    What is being done and to what, for events and error messages.

    Attributes:
        description: Action description (e.g. "Click element")
        target: Human-readable target name (e.g. "Submit button")
    """
    description: str
    target: str = ""


@dataclass
class ActionOutcome(Generic[T]):
    """
    Result of running an operation once.

    Attributes:
        succeeded: Whether the operation completed
        value: Value produced on success
        last_observed_value: Last value seen by a wait before it gave up
        failure_reason: Error message on failure
        error: The exception raised on failure
    """
    succeeded: bool
    value: Optional[T] = None
    last_observed_value: Any = None
    failure_reason: Optional[str] = None
    error: Optional[BaseException] = None


def capture(op: Callable[[], T]) -> ActionOutcome[T]:
    """
    Run ``op`` and record its outcome.

    Validation errors are not captured; they propagate to the caller.
    """
    try:
        value = op()
    except FrameworkError as e:
        if e.is_validation:
            raise
        last_value = e.last_value if isinstance(e, TimeoutExceeded) else None
        return ActionOutcome(False, last_observed_value=last_value, failure_reason=str(e), error=e)
    except Exception as e:
        return ActionOutcome(False, failure_reason=f"{type(e).__name__}: {e}", error=e)
    return ActionOutcome(True, value=value, last_observed_value=value)


def normalize_error(error: BaseException, diagnostics: Diagnostics) -> FrameworkError:
    """Wrap any failure into a FrameworkError naming the action and target."""
    kind = kind_of(error)
    target = f" [{diagnostics.target}]" if diagnostics.target else ""
    reason = error.message if isinstance(error, FrameworkError) else f"{type(error).__name__}: {error}"
    return FrameworkError(
        f"{diagnostics.description} failed{target}: {reason}",
        cause=error,
        kind=kind,
    )


def execute(
    op: Callable[[], T],
    channel: FailureChannel,
    diagnostics: Diagnostics,
    reporter: Optional[ActionReporter] = None,
    soft_failure_value: Any = False,
    returns_value: bool = False,
) -> Any:
    """
    Run ``op`` through the given failure channel.

    Args:
        op: Zero-argument operation; the same closure is used for every channel
        channel: HARD, SOFT or SILENT
        diagnostics: Description and target for events and messages
        reporter: Event sink (HARD and SOFT only); a fresh one if None
        soft_failure_value: Value returned by SOFT on failure (False or None)
        returns_value: SOFT success passes the produced value through
            unchanged (None included) instead of returning True

    Returns:
        HARD/SILENT: the value produced by ``op``
        SOFT: the produced value when ``returns_value``, else True;
              ``soft_failure_value`` on failure

    Raises:
        FrameworkError: HARD/SILENT failures; validation errors on any channel
    """
    channel = FailureChannel(channel)

    if channel is FailureChannel.SILENT:
        outcome = capture(op)
        if outcome.succeeded:
            return outcome.value
        raise normalize_error(outcome.error, diagnostics)

    reporter = reporter or ActionReporter()
    description, target = diagnostics.description, diagnostics.target

    with allure.step(f"{description}: {target}" if target else description):
        reporter.start(description, target)
        try:
            outcome = capture(op)
        except FrameworkError as e:
            if channel is FailureChannel.HARD:
                reporter.failure(description, target, e.message)
            raise

        if outcome.succeeded:
            reporter.success(description, target)
            if channel is FailureChannel.SOFT and not returns_value:
                return True
            return outcome.value

        if channel is FailureChannel.HARD:
            reporter.failure(description, target, outcome.failure_reason)
            raise normalize_error(outcome.error, diagnostics)

        logger.warning(f"Soft {description} returned a negative result [{target}]: {outcome.failure_reason}")
        reporter.success(f"{description} - negative result", target)
        return soft_failure_value


__all__ = [
    "FailureChannel",
    "Diagnostics",
    "ActionOutcome",
    "capture",
    "normalize_error",
    "execute",
]
