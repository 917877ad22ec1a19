"""
================================================================================
Element Finder
================================================================================

Resolves locator expressions to element handles through the polling wait
engine.

Acquisition modes:
    - Single element: first match satisfying a readiness predicate
    - Multiple elements: full snapshot once at least one match is ready
    - Child element(s): parent first (own timeout), then descendants
      scoped under that parent (independent timeout)

All lookups run against the session's current frame/window. The finder never
switches or restores context; a lookup in the wrong frame fails as "not
found", and the error message names the context that was searched.

Snapshot policy:
    find_elements() returns the matches as of one instant. Handles in the
    list can go stale if the page mutates while the caller iterates. Callers
    that mutate the page between items should use element_at(), which
    re-resolves the list for every index.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from .conditions import PRESENT, Readiness
from .config_loader import ConfigLoader
from .exceptions import TimeoutExceeded, require_text, validation_error
from .session import AutomationSession, ElementHandle, StaleElementError
from .wait_helpers import WaitSpec, wait_until


class ElementFinder:
    """
    Locator-to-handle resolution with waiting.

    Usage:
        finder = ElementFinder(session, config)
        button = finder.find_element("//button[@id='go']", readiness=CLICKABLE, timeout=5)
        button.click()
    """

    def __init__(self, session: AutomationSession, config: Optional[ConfigLoader] = None):
        self.session = session
        self.config = config

    def spec(self, timeout: Optional[float] = None) -> WaitSpec:
        """Wait spec built from configuration defaults plus a timeout override."""
        return WaitSpec.from_config(self.config, timeout=timeout)

    def find_element(
        self,
        locator: str,
        readiness: Readiness = PRESENT,
        timeout: Optional[float] = None,
        stage: Optional[str] = None,
    ) -> ElementHandle:
        """
        Wait for the first match of ``locator`` that satisfies ``readiness``.

        Args:
            locator: Locator expression
            readiness: Predicate the element must satisfy
            timeout: Timeout in seconds (configuration default if None)
            stage: Optional label recorded on the timeout error

        Returns:
            The matching element handle

        Raises:
            FrameworkError: kind VALIDATION for an empty locator or bad timeout
            TimeoutExceeded: When no ready match appears in time
        """
        require_text(locator, "Locator")
        spec = self.spec(timeout)
        spec.validate()

        def _first_ready(session: AutomationSession) -> Optional[ElementHandle]:
            return _first_matching(session.find_elements(locator), readiness)

        try:
            return wait_until(
                self.session,
                _first_ready,
                spec,
                description=f"element '{locator}' to be {readiness.name}",
                stage=stage,
            )
        except TimeoutExceeded as e:
            raise self._not_found(e, f"Element '{locator}' was not {readiness.name}") from e

    def find_elements(
        self,
        locator: str,
        readiness: Readiness = PRESENT,
        timeout: Optional[float] = None,
        require_all: bool = False,
    ) -> List[ElementHandle]:
        """
        Wait until matches exist, then return the full current snapshot.

        With ``require_all`` every match must satisfy ``readiness``;
        otherwise one ready match is enough.

        Returns:
            Every match of ``locator`` at the instant the wait succeeded
        """
        require_text(locator, "Locator")
        spec = self.spec(timeout)
        spec.validate()

        def _snapshot(session: AutomationSession) -> Optional[List[ElementHandle]]:
            elements = list(session.find_elements(locator))
            if not elements:
                return None
            if require_all:
                ready = all(readiness(el) for el in elements)
            else:
                ready = _first_matching(elements, readiness) is not None
            return elements if ready else None

        quantifier = "all" if require_all else "any"
        try:
            elements = wait_until(
                self.session,
                _snapshot,
                spec,
                description=f"{quantifier} elements '{locator}' to be {readiness.name}",
            )
        except TimeoutExceeded as e:
            raise self._not_found(e, f"No elements '{locator}' were {readiness.name}") from e

        logger.debug(f"Resolved {len(elements)} elements for '{locator}'")
        return elements

    def element_at(
        self,
        locator: str,
        index: int,
        readiness: Readiness = PRESENT,
        timeout: Optional[float] = None,
    ) -> ElementHandle:
        """
        Re-resolve ``locator`` and return the match at ``index``.

        One wait covers both finding the matches and the readiness of the
        indexed one.

        Raises:
            FrameworkError: kind VALIDATION for a negative index, or one
                outside the first non-empty snapshot
        """
        require_text(locator, "Locator")
        if index < 0:
            raise validation_error(f"Index cannot be negative, got {index}")
        spec = self.spec(timeout)
        spec.validate()

        def _indexed(session: AutomationSession) -> Optional[ElementHandle]:
            elements = session.find_elements(locator)
            if not elements:
                return None
            if index >= len(elements):
                raise validation_error(
                    f"Index {index} is out of bounds for {len(elements)} elements matching '{locator}'"
                )
            element = elements[index]
            return element if readiness(element) else None

        try:
            return wait_until(
                self.session,
                _indexed,
                spec,
                description=f"element '{locator}'[{index}] to be {readiness.name}",
            )
        except TimeoutExceeded as e:
            raise self._not_found(e, f"Element '{locator}'[{index}] was not {readiness.name}") from e

    def find_child(
        self,
        parent_locator: str,
        child_locator: str,
        readiness: Readiness = PRESENT,
        parent_timeout: Optional[float] = None,
        child_timeout: Optional[float] = None,
    ) -> ElementHandle:
        """
        Resolve a parent, then a descendant scoped under it.

        A missing parent fails with stage ``"parent"``; a parent without a
        matching descendant fails with stage ``"child"``.
        """
        require_text(child_locator, "Child locator")
        parent = self.find_element(parent_locator, timeout=parent_timeout, stage="parent")
        spec = self.spec(child_timeout)
        spec.validate()

        def _first_child(session: AutomationSession) -> Optional[ElementHandle]:
            return _first_matching(session.find_child_elements(parent, child_locator), readiness)

        try:
            return wait_until(
                self.session,
                _first_child,
                spec,
                description=f"child '{child_locator}' inside '{parent_locator}' to be {readiness.name}",
                stage="child",
            )
        except TimeoutExceeded as e:
            raise self._not_found(
                e,
                f"Child element '{child_locator}' was not {readiness.name} inside parent '{parent_locator}'",
            ) from e

    def find_children(
        self,
        parent_locator: str,
        child_locator: str,
        parent_timeout: Optional[float] = None,
        child_timeout: Optional[float] = None,
    ) -> List[ElementHandle]:
        """Snapshot of every descendant of the parent matching ``child_locator``."""
        require_text(child_locator, "Child locator")
        parent = self.find_element(parent_locator, timeout=parent_timeout, stage="parent")
        spec = self.spec(child_timeout)
        spec.validate()

        def _children(session: AutomationSession) -> Optional[List[ElementHandle]]:
            return list(session.find_child_elements(parent, child_locator)) or None

        try:
            return wait_until(
                self.session,
                _children,
                spec,
                description=f"children '{child_locator}' inside '{parent_locator}'",
                stage="child",
            )
        except TimeoutExceeded as e:
            raise self._not_found(
                e, f"No child elements '{child_locator}' inside parent '{parent_locator}'"
            ) from e

    def count(self, locator: str) -> int:
        """Current number of matches, without waiting."""
        require_text(locator, "Locator")
        return len(self.session.find_elements(locator))

    def _not_found(self, error: TimeoutExceeded, message: str) -> TimeoutExceeded:
        """Rebuild a timeout with the searched context in its message."""
        try:
            context = self.session.current_context()
        except Exception as e:
            context = f"<unknown: {type(e).__name__}>"
        return TimeoutExceeded(
            f"{message} within {error.timeout}s (searched in {context})",
            description=error.description,
            timeout=error.timeout,
            attempt_count=error.attempt_count,
            elapsed_time=error.elapsed_time,
            last_value=error.last_value,
            last_error=error.last_error,
            stage=error.stage,
        )


def _first_matching(elements: List[ElementHandle], readiness: Readiness) -> Optional[ElementHandle]:
    """
    First element satisfying ``readiness``.

    Stale handles are skipped; if nothing is ready and one of them was
    stale, the StaleElementError is re-raised so the wait records it.
    """
    stale: Optional[StaleElementError] = None
    for element in elements:
        try:
            if readiness(element):
                return element
        except StaleElementError as e:
            stale = e
    if stale is not None:
        raise stale
    return None


__all__ = [
    "ElementFinder",
]
