"""
================================================================================
Keyword Base
================================================================================

Shared plumbing for keyword groups: the injected session, configuration,
reporter and data source, plus helpers that route every keyword through the
single execute() dispatcher.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..common import mask
from ..framework.config_loader import ConfigLoader
from ..framework.data_source import ExternalDataSource, YamlDataSource, resolve_value
from ..framework.element_finder import ElementFinder
from ..framework.exceptions import TimeoutExceeded, require_text
from ..framework.execution import Diagnostics, FailureChannel, execute
from ..framework.reporting import ActionReporter
from ..framework.session import AutomationSession, ElementHandle, NoSuchElementError
from ..framework.wait_helpers import WaitSpec, wait_until


class Mismatch:
    """Falsy poll result that still carries the value observed on the page."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return repr(self.value)


class KeywordGroup:
    """
    Base class for keyword groups.

    All collaborators are injected; nothing is looked up from global state.
    """

    def __init__(
        self,
        session: AutomationSession,
        config: Optional[ConfigLoader] = None,
        reporter: Optional[ActionReporter] = None,
        data_source: Optional[ExternalDataSource] = None,
    ):
        """
        Initialize keyword group.

        Args:
            session: Automation session driving the browser
            config: Configuration for wait and retry defaults
            reporter: Event sink for Hard/Soft keywords
            data_source: Lookup for values passed with use_external_source=True.
                Defaults to the file named by ``data.file`` when configured.
        """
        self.session = session
        self.config = config
        self.reporter = reporter or ActionReporter()
        if data_source is None and config is not None and config.get_bool("data.enabled", False):
            data_source = YamlDataSource.from_config(config)
        self.data_source = data_source
        self.finder = ElementFinder(session, config)

    def _run(
        self,
        op: Callable[[], Any],
        channel: FailureChannel,
        description: str,
        target: str = "",
        soft_failure_value: Any = False,
        returns_value: Optional[bool] = None,
    ) -> Any:
        # Keywords failing softly with None produce a value; the rest report True
        if returns_value is None:
            returns_value = soft_failure_value is None
        return execute(
            op,
            channel,
            Diagnostics(description, target),
            self.reporter,
            soft_failure_value=soft_failure_value,
            returns_value=returns_value,
        )

    def _resolve(
        self,
        value: str,
        use_external_source: bool,
        test_case: Optional[str],
        field_name: str,
    ) -> str:
        return resolve_value(
            value,
            use_external_source=use_external_source,
            test_case=test_case,
            source=self.data_source,
            field_name=field_name,
        )

    def _spec(self, timeout: Optional[float]) -> WaitSpec:
        spec = WaitSpec.from_config(self.config, timeout=timeout)
        spec.validate()
        return spec

    def _wait(self, condition: Callable[[AutomationSession], Any], timeout: Optional[float], description: str) -> Any:
        return wait_until(self.session, condition, self._spec(timeout), description=description)

    def _await_value(
        self,
        read: Callable[[AutomationSession], Any],
        accept: Callable[[Any], bool],
        timeout: Optional[float],
        subject: str,
        expectation: str,
    ) -> Any:
        """
        Poll ``read(session)`` until ``accept`` holds for the observed value.

        Args:
            read: Reads the observed value; may raise a transient session error
            accept: True when the observed value meets the expectation
            timeout: Timeout in seconds (configuration default if None)
            subject: What is being read, e.g. "Text of [Banner]"
            expectation: e.g. "'Welcome'" or "to contain 'Wel'"

        Returns:
            The accepted value

        Raises:
            TimeoutExceeded: With an "expected X but found Y" message built
                from the last observed value
        """
        spec = self._spec(timeout)

        def _poll(session: AutomationSession) -> Any:
            value = read(session)
            return [value] if accept(value) else Mismatch(value)

        try:
            return wait_until(self.session, _poll, spec, description=f"{subject} {expectation}")[0]
        except TimeoutExceeded as e:
            observed = e.last_value.value if isinstance(e.last_value, Mismatch) else None
            if isinstance(e.last_value, Mismatch):
                found = f"'{observed}'"
            elif e.last_error is not None:
                found = f"nothing ({type(e.last_error).__name__} in {self._context()})"
            else:
                found = "nothing"
            raise TimeoutExceeded(
                f"{subject} expected {expectation} but found {found}",
                description=e.description,
                timeout=e.timeout,
                attempt_count=e.attempt_count,
                elapsed_time=e.elapsed_time,
                last_value=observed,
                last_error=e.last_error,
            ) from e

    def _await_element_value(
        self,
        locator: str,
        read: Callable[[ElementHandle], Any],
        accept: Callable[[Any], bool],
        timeout: Optional[float],
        subject: str,
        expectation: str,
    ) -> Any:
        """Like _await_value, reading from the first match of ``locator``."""
        require_text(locator, "Locator")

        def _read(session: AutomationSession) -> Any:
            elements = session.find_elements(locator)
            if not elements:
                raise NoSuchElementError(f"No element matches '{locator}'")
            return read(elements[0])

        return self._await_value(_read, accept, timeout, subject, expectation)

    def _context(self) -> str:
        try:
            return self.session.current_context()
        except Exception as e:
            return f"<unknown: {type(e).__name__}>"


def target_name(locator: str, name: Optional[str]) -> str:
    """Human-readable target: the element name, else the locator."""
    return name or locator


def masked(value: Optional[str]) -> str:
    return f"'{mask(value)}'"


__all__ = [
    "KeywordGroup",
    "Mismatch",
    "target_name",
    "masked",
]
