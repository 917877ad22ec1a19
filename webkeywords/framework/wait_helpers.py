# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Polling wait engine used by every keyword that has to wait for the page.
#
# Key Features:
#   - Fixed-interval polling with a hard deadline
#   - Ignored error set (transient "not ready yet" errors)
#   - Fail-fast on any other error
#   - Last observed value/error kept for diagnostics
#
# Usage:
#   spec = WaitSpec.from_config(config, timeout=5)
#   title = wait_until(session, lambda s: s.title or None, spec, "page title")
#
# ================================================================================

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from loguru import logger

from .config_loader import (
    ConfigLoader,
    DEFAULT_WAIT_POLLING_MILLIS,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
)
from .exceptions import TimeoutExceeded, validation_error
from .session import AutomationSession, TRANSIENT_ERRORS


T = TypeVar("T")

# Clock hooks; tests replace these with a fake clock
_now: Callable[[], float] = time.monotonic
_sleep: Callable[[float], None] = time.sleep


@dataclass(frozen=True)
class WaitSpec:
    """
    Parameters of a single polling wait.

    Attributes:
        timeout_seconds: Deadline measured from the first poll
        poll_interval_millis: Delay between polls
        ignored_errors: Error types counted as an unsuccessful poll
    """
    timeout_seconds: float = DEFAULT_WAIT_TIMEOUT_SECONDS
    poll_interval_millis: int = DEFAULT_WAIT_POLLING_MILLIS
    ignored_errors: Tuple[Type[BaseException], ...] = field(default=TRANSIENT_ERRORS)

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigLoader],
        timeout: Optional[float] = None,
        polling_millis: Optional[int] = None,
        ignored: Optional[Tuple[Type[BaseException], ...]] = None,
    ) -> "WaitSpec":
        """
        Build a spec from configuration defaults plus per-call overrides.

        An explicit override is used as given (and validated later), so a
        caller passing ``timeout=0`` gets a validation error rather than the
        configured default.
        """
        if config is not None:
            default_timeout = config.wait_timeout_seconds
            default_polling = config.wait_polling_millis
        else:
            default_timeout = DEFAULT_WAIT_TIMEOUT_SECONDS
            default_polling = DEFAULT_WAIT_POLLING_MILLIS

        return cls(
            timeout_seconds=default_timeout if timeout is None else timeout,
            poll_interval_millis=default_polling if polling_millis is None else polling_millis,
            ignored_errors=TRANSIENT_ERRORS if ignored is None else tuple(ignored),
        )

    @property
    def interval_seconds(self) -> float:
        return self.poll_interval_millis / 1000.0

    def ignoring(self, *errors: Type[BaseException]) -> "WaitSpec":
        """Return a copy that additionally ignores the given error types."""
        return replace(self, ignored_errors=tuple(self.ignored_errors) + tuple(errors))

    def validate(self) -> None:
        """
        Reject unusable specs before any poll happens.

        Raises:
            FrameworkError: kind VALIDATION
        """
        if self.timeout_seconds is None or self.timeout_seconds <= 0:
            raise validation_error(
                f"Wait timeout must be greater than zero, got {self.timeout_seconds}"
            )
        if self.poll_interval_millis is None or self.poll_interval_millis <= 0:
            raise validation_error(
                f"Polling interval must be greater than zero, got {self.poll_interval_millis}"
            )


def wait_until(
    session: AutomationSession,
    predicate: Callable[[AutomationSession], T],
    spec: WaitSpec,
    description: str = "condition",
    stage: Optional[str] = None,
) -> T:
    """
    Poll ``predicate(session)`` until it returns a truthy value.

    The predicate runs immediately and then every ``spec.poll_interval_millis``
    until it succeeds or ``spec.timeout_seconds`` have elapsed. Errors listed
    in ``spec.ignored_errors`` count as an unsuccessful poll; any other error
    propagates at once.

    Args:
        session: Session handed to the predicate
        predicate: Callable returning a truthy value on success
        spec: Timeout, interval and ignored errors
        description: Human-readable description for logging
        stage: Optional label recorded on the timeout error

    Returns:
        The first truthy value returned by the predicate

    Raises:
        FrameworkError: kind VALIDATION when the spec is unusable
        TimeoutExceeded: If the deadline passes without success
    """
    spec.validate()

    start_time = _now()
    attempt = 0
    last_value: Any = None
    last_error: Optional[BaseException] = None

    logger.debug(
        f"Starting wait: {description} "
        f"(timeout={spec.timeout_seconds}s, interval={spec.poll_interval_millis}ms)"
    )

    while True:
        attempt += 1
        try:
            result = predicate(session)
            if result:
                logger.debug(
                    f"Wait successful after {attempt} attempts "
                    f"({_now() - start_time:.2f}s): {description}"
                )
                return result
            last_value = result
            last_error = None
        except spec.ignored_errors as e:
            last_value = None
            last_error = e

        elapsed = _now() - start_time
        if elapsed >= spec.timeout_seconds:
            break

        _sleep(min(spec.interval_seconds, spec.timeout_seconds - elapsed))

    elapsed = _now() - start_time
    logger.debug(f"Timeout after {elapsed:.2f}s waiting for: {description}")
    raise TimeoutExceeded(
        f"Timed out waiting for {description} after {spec.timeout_seconds}s",
        description=description,
        timeout=spec.timeout_seconds,
        attempt_count=attempt,
        elapsed_time=elapsed,
        last_value=last_value,
        last_error=last_error,
        stage=stage,
    )


def pause(seconds: float) -> None:
    """Blocking sleep through the engine's clock hook."""
    if seconds is None or seconds < 0:
        raise validation_error(f"Pause duration cannot be negative, got {seconds}")
    _sleep(seconds)


__all__ = [
    "WaitSpec",
    "wait_until",
    "pause",
]
