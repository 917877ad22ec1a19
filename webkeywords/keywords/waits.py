# ================================================================================
# Wait Keywords
# ================================================================================
#
# Explicit waits exposed as keywords. Element waits return the element (or
# the snapshot of elements); page waits return the condition's value.
#
# A Soft wait that times out returns False (None for waits that produce a
# value) instead of raising.
#
# ================================================================================

from __future__ import annotations

from typing import Any, List, Optional

from loguru import logger

from ..framework.conditions import (
    CLICKABLE,
    ENABLED,
    PRESENT,
    SELECTED,
    VISIBLE,
    Readiness,
    alert_present,
    attribute_contains,
    element_count_to_be,
    invisibility_of,
    javascript_returns_true,
    number_of_windows_to_be,
    text_contains,
    title_contains,
    title_is,
    url_contains,
    url_is,
    value_contains,
)
from ..framework.exceptions import require_text, validation_error
from ..framework.execution import FailureChannel
from ..framework.session import ElementHandle
from ..framework.wait_helpers import pause
from .base import KeywordGroup, masked, target_name


HARD = FailureChannel.HARD


class Waits(KeywordGroup):
    """Keywords that block until the page reaches a state."""

    # =========================================================================
    # Element waits
    # =========================================================================

    def _wait_for_element(
        self,
        locator: str,
        readiness: Readiness,
        name: Optional[str],
        channel: FailureChannel,
        timeout: Optional[float],
    ) -> Optional[ElementHandle]:
        return self._run(
            lambda: self.finder.find_element(locator, readiness, timeout),
            channel,
            f"Wait for element to be {readiness.name}",
            target_name(locator, name),
            soft_failure_value=None,
        )

    def wait_for_element_visible(self, locator: str, name: Optional[str] = None,
                                 channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._wait_for_element(locator, VISIBLE, name, channel, timeout)

    def wait_for_element_clickable(self, locator: str, name: Optional[str] = None,
                                   channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._wait_for_element(locator, CLICKABLE, name, channel, timeout)

    def wait_for_element_present(self, locator: str, name: Optional[str] = None,
                                 channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._wait_for_element(locator, PRESENT, name, channel, timeout)

    def wait_for_element_selected(self, locator: str, name: Optional[str] = None,
                                  channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._wait_for_element(locator, SELECTED, name, channel, timeout)

    def wait_for_element_enabled(self, locator: str, name: Optional[str] = None,
                                 channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._wait_for_element(locator, ENABLED, name, channel, timeout)

    def wait_for_element_invisible(self, locator: str, name: Optional[str] = None,
                                   channel: FailureChannel = HARD, timeout: Optional[float] = None):
        require_text(locator, "Locator")
        return self._run(
            lambda: self._wait(invisibility_of(locator), timeout, f"'{locator}' to be invisible"),
            channel,
            "Wait for element to be invisible",
            target_name(locator, name),
        )

    def wait_for_text_in_element(
        self,
        locator: str,
        text: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(text, "Text")
        return self._wait_for_element(locator, VISIBLE & text_contains(text), name, channel, timeout)

    def wait_for_value_in_input(
        self,
        locator: str,
        value: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(value, "Value")
        return self._wait_for_element(locator, value_contains(value), name, channel, timeout)

    def wait_for_attribute_to_contain(
        self,
        locator: str,
        attribute: str,
        fragment: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(attribute, "Attribute name")
        require_text(fragment, "Attribute fragment")
        return self._wait_for_element(locator, attribute_contains(attribute, fragment), name, channel, timeout)

    def wait_for_all_elements_visible(
        self,
        locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ) -> Optional[List[ElementHandle]]:
        """Wait until every match is displayed; returns the snapshot."""
        return self._run(
            lambda: self.finder.find_elements(locator, VISIBLE, timeout, require_all=True),
            channel,
            "Wait for all elements to be visible",
            target_name(locator, name),
            soft_failure_value=None,
        )

    def wait_for_element_count(
        self,
        locator: str,
        expected: int,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(locator, "Locator")
        return self._run(
            lambda: self._wait(element_count_to_be(locator, expected), timeout,
                               f"{expected} elements matching '{locator}'"),
            channel,
            f"Wait for {expected} elements",
            target_name(locator, name),
        )

    # =========================================================================
    # Page waits
    # =========================================================================

    def wait_for_title_is(self, title: str, channel: FailureChannel = HARD, timeout: Optional[float] = None):
        require_text(title, "Title")
        return self._run(
            lambda: self._wait(title_is(title), timeout, f"title to be '{title}'"),
            channel,
            "Wait for page title",
            title,
        )

    def wait_for_title_contains(self, fragment: str, channel: FailureChannel = HARD,
                                timeout: Optional[float] = None):
        require_text(fragment, "Title fragment")
        return self._run(
            lambda: self._wait(title_contains(fragment), timeout, f"title to contain '{fragment}'"),
            channel,
            "Wait for page title to contain",
            fragment,
        )

    def wait_for_url_to_be(self, url: str, channel: FailureChannel = HARD, timeout: Optional[float] = None):
        require_text(url, "URL")
        return self._run(
            lambda: self._wait(url_is(url), timeout, f"URL to be '{url}'"),
            channel,
            "Wait for URL",
            url,
        )

    def wait_for_url_contains(self, fragment: str, channel: FailureChannel = HARD,
                              timeout: Optional[float] = None):
        require_text(fragment, "URL fragment")
        return self._run(
            lambda: self._wait(url_contains(fragment), timeout, f"URL to contain '{fragment}'"),
            channel,
            "Wait for URL to contain",
            fragment,
        )

    def wait_for_alert_present(self, channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._run(
            lambda: self._wait(alert_present(), timeout, "alert to be present"),
            channel,
            "Wait for alert",
            "Alert",
        )

    def wait_for_number_of_windows(self, expected: int, channel: FailureChannel = HARD,
                                   timeout: Optional[float] = None):
        return self._run(
            lambda: self._wait(number_of_windows_to_be(expected), timeout, f"{expected} open windows"),
            channel,
            f"Wait for {expected} windows",
            "Browser windows",
        )

    def wait_for_javascript_condition(self, script: str, channel: FailureChannel = HARD,
                                      timeout: Optional[float] = None):
        """Wait until ``script`` (a ``return ...`` body) evaluates truthy."""
        require_text(script, "Script")
        return self._run(
            lambda: self._wait(javascript_returns_true(script), timeout, "JavaScript condition"),
            channel,
            "Wait for JavaScript condition",
            masked(script),
        )

    def wait_for_seconds(self, seconds: Any) -> None:
        """
        Unconditional pause.

        Raises:
            FrameworkError: kind VALIDATION for a negative or non-numeric duration
        """
        try:
            duration = float(seconds)
        except (TypeError, ValueError):
            raise validation_error(f"Pause duration must be a number, got {seconds!r}") from None
        logger.info(f"Pausing for {duration}s")
        pause(duration)


__all__ = [
    "Waits",
]
