# ================================================================================
# Retry Module
# ================================================================================
#
# Retries a whole action (acquire + interact) with a linearly growing delay.
#
# The action is re-run from scratch on every attempt, so an element handle
# that went stale in attempt N is never reused in attempt N+1.
#
# Delay before attempt i (1-indexed, i > 1) = base_delay_millis * (i - 1)
#
# ================================================================================

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, List, Optional, TypeVar

from loguru import logger

from . import wait_helpers
from .config_loader import (
    ConfigLoader,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_MILLIS,
    RETRY_ATTEMPTS_KEY,
    RETRY_DELAY_KEY,
)
from .exceptions import ErrorKind, FrameworkError, kind_of, validation_error


T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts, at least 1
        base_delay_millis: Delay unit; attempt i waits base * (i - 1) first
    """
    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    base_delay_millis: int = DEFAULT_RETRY_DELAY_MILLIS

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigLoader],
        max_attempts: Optional[int] = None,
        base_delay_millis: Optional[int] = None,
    ) -> "RetryPolicy":
        if max_attempts is None:
            max_attempts = (
                config.get_int(RETRY_ATTEMPTS_KEY, DEFAULT_RETRY_ATTEMPTS, positive=True)
                if config is not None else DEFAULT_RETRY_ATTEMPTS
            )
        if base_delay_millis is None:
            base_delay_millis = (
                config.get_int(RETRY_DELAY_KEY, DEFAULT_RETRY_DELAY_MILLIS)
                if config is not None else DEFAULT_RETRY_DELAY_MILLIS
            )
        return cls(max_attempts=max_attempts, base_delay_millis=base_delay_millis)

    def validate(self) -> None:
        if self.max_attempts is None or self.max_attempts < 1:
            raise validation_error(
                f"Maximum attempts must be at least 1, got {self.max_attempts}"
            )
        if self.base_delay_millis is None or self.base_delay_millis < 0:
            raise validation_error(
                f"Base delay cannot be negative, got {self.base_delay_millis}"
            )

    def delay_before(self, attempt: int) -> float:
        """Delay in seconds before the given 1-indexed attempt."""
        if attempt <= 1:
            return 0.0
        return self.base_delay_millis * (attempt - 1) / 1000.0


def retry(
    action: Callable[[], T],
    policy: RetryPolicy,
    description: str = "operation",
) -> T:
    """
    Run ``action`` until it succeeds or ``policy.max_attempts`` is used up.

    Args:
        action: Zero-argument callable performing a full acquire-and-interact cycle
        policy: Attempt count and delay unit
        description: Human-readable description for logging

    Returns:
        The result of the first successful attempt

    Raises:
        FrameworkError: kind VALIDATION for a bad policy (before any attempt)
            or when an attempt itself raises a validation error;
            kind FATAL if the backoff sleep is interrupted;
            otherwise wraps the last attempt's error after the final attempt
    """
    policy.validate()

    failures: List[BaseException] = []

    for attempt in range(1, policy.max_attempts + 1):
        delay = policy.delay_before(attempt)
        if delay > 0:
            logger.info(
                f"Retrying {description} in {delay:.1f}s - "
                f"attempt {attempt}/{policy.max_attempts}"
            )
            try:
                wait_helpers._sleep(delay)
            except KeyboardInterrupt as e:
                raise FrameworkError(
                    f"Interrupted during retry delay for {description}",
                    cause=e,
                    kind=ErrorKind.FATAL,
                ) from e

        try:
            result = action()
        except FrameworkError as e:
            if e.is_validation:
                raise
            failures.append(e)
        except Exception as e:
            failures.append(e)
        else:
            if attempt > 1:
                logger.info(f"{description} succeeded on attempt {attempt}/{policy.max_attempts}")
            return result

        last = failures[-1]
        logger.warning(
            f"Attempt {attempt}/{policy.max_attempts} failed for "
            f"{description}: {last}"
        )

    last = failures[-1]
    logger.error(
        f"All {policy.max_attempts} attempts failed for {description}: {last}"
    )
    error = FrameworkError(
        f"Failed {description} after {policy.max_attempts} attempts",
        cause=last,
        kind=kind_of(last),
    )
    error.attempts = failures
    raise error


def with_retry(policy: Optional[RetryPolicy] = None):
    """
    Decorator for running a function under retry().

    Args:
        policy: RetryPolicy controlling attempts and delay
    """
    if policy is None:
        policy = RetryPolicy()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return retry(lambda: func(*args, **kwargs), policy, description=func.__name__)
        return wrapper
    return decorator


__all__ = [
    "RetryPolicy",
    "retry",
    "with_retry",
]
