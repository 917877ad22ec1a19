"""
================================================================================
Verification Keywords
================================================================================

Assertions about element state, text, attributes, page title/URL, element
counts and alerts.

Every verification polls until the expectation holds or the timeout passes.
Text and value checks report the last value they saw:

    Text of [Banner] expected 'Welcome' but found 'Loading...'

With FailureChannel.SOFT a verification returns True/False instead of
raising.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

from ..framework.conditions import (
    DISABLED,
    ENABLED,
    NOT_SELECTED,
    PRESENT,
    SELECTED,
    VISIBLE,
    Readiness,
    absence_of,
    invisibility_of,
)
from ..framework.exceptions import require_text, validation_error
from ..framework.execution import FailureChannel
from ..framework.session import AutomationSession
from .base import KeywordGroup, masked, target_name


HARD = FailureChannel.HARD


class Verifications(KeywordGroup):
    """Keywords that check the page and fail (or return False) on mismatch."""

    def _expect(self, read, accept, timeout, subject, expectation) -> None:
        self._await_value(read, accept, timeout, subject, expectation)

    def _expect_element(self, locator, read, accept, timeout, subject, expectation) -> None:
        self._await_element_value(locator, read, accept, timeout, subject, expectation)

    # =========================================================================
    # Element state
    # =========================================================================

    def _verify_readiness(
        self,
        locator: str,
        readiness: Readiness,
        name: Optional[str],
        channel: FailureChannel,
        timeout: Optional[float],
    ):
        def _verify() -> None:
            self.finder.find_element(locator, readiness, timeout)

        return self._run(_verify, channel, f"Verify element is {readiness.name}", target_name(locator, name))

    def verify_element_visible(self, locator: str, name: Optional[str] = None,
                               channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, VISIBLE, name, channel, timeout)

    def verify_element_present(self, locator: str, name: Optional[str] = None,
                               channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, PRESENT, name, channel, timeout)

    def verify_element_enabled(self, locator: str, name: Optional[str] = None,
                               channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, ENABLED, name, channel, timeout)

    def verify_element_disabled(self, locator: str, name: Optional[str] = None,
                                channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, DISABLED, name, channel, timeout)

    def verify_element_selected(self, locator: str, name: Optional[str] = None,
                                channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, SELECTED, name, channel, timeout)

    def verify_element_not_selected(self, locator: str, name: Optional[str] = None,
                                    channel: FailureChannel = HARD, timeout: Optional[float] = None):
        return self._verify_readiness(locator, NOT_SELECTED, name, channel, timeout)

    def verify_element_not_visible(self, locator: str, name: Optional[str] = None,
                                   channel: FailureChannel = HARD, timeout: Optional[float] = None):
        """Passes once no match of ``locator`` is displayed (absent counts)."""
        require_text(locator, "Locator")
        return self._run(
            lambda: self._wait(invisibility_of(locator), timeout, f"'{locator}' to be invisible"),
            channel,
            "Verify element is not visible",
            target_name(locator, name),
        )

    def verify_element_not_present(self, locator: str, name: Optional[str] = None,
                                   channel: FailureChannel = HARD, timeout: Optional[float] = None):
        require_text(locator, "Locator")
        return self._run(
            lambda: self._wait(absence_of(locator), timeout, f"'{locator}' to be absent"),
            channel,
            "Verify element is not present",
            target_name(locator, name),
        )

    # =========================================================================
    # Text, attributes and values
    # =========================================================================

    def verify_text_equals(
        self,
        locator: str,
        expected: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Verify an element's trimmed text equals ``expected``.

        Args:
            locator: Locator expression
            expected: Expected text, or a data key when use_external_source is True
            name: Element name for reporting
            use_external_source: Resolve ``expected`` through the data source
            test_case: Test case name for the data source lookup
            channel: Failure channel
            timeout: Timeout in seconds (configuration default if None)
        """
        require_text(expected, "Expected text")
        value = self._resolve(expected, use_external_source, test_case, name or "expected text")
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect_element(
                locator,
                lambda el: (el.text or "").strip(),
                lambda actual: actual == value.strip(),
                timeout,
                f"Text of [{target}]",
                f"'{value}'",
            ),
            channel,
            f"Verify text equals {masked(value)}",
            target,
        )

    def verify_text_contains(
        self,
        locator: str,
        fragment: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(fragment, "Expected text fragment")
        value = self._resolve(fragment, use_external_source, test_case, name or "expected text")
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect_element(
                locator,
                lambda el: el.text or "",
                lambda actual: value in actual,
                timeout,
                f"Text of [{target}]",
                f"to contain '{value}'",
            ),
            channel,
            f"Verify text contains {masked(value)}",
            target,
        )

    def verify_attribute_equals(
        self,
        locator: str,
        attribute: str,
        expected: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(attribute, "Attribute name")
        require_text(expected, "Expected attribute value")
        value = self._resolve(expected, use_external_source, test_case, attribute)
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect_element(
                locator,
                lambda el: el.get_attribute(attribute),
                lambda actual: actual == value,
                timeout,
                f"Attribute '{attribute}' of [{target}]",
                f"'{value}'",
            ),
            channel,
            f"Verify attribute '{attribute}' equals {masked(value)}",
            target,
        )

    def verify_attribute_contains(
        self,
        locator: str,
        attribute: str,
        fragment: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(attribute, "Attribute name")
        require_text(fragment, "Expected attribute fragment")
        value = self._resolve(fragment, use_external_source, test_case, attribute)
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect_element(
                locator,
                lambda el: el.get_attribute(attribute) or "",
                lambda actual: value in actual,
                timeout,
                f"Attribute '{attribute}' of [{target}]",
                f"to contain '{value}'",
            ),
            channel,
            f"Verify attribute '{attribute}' contains {masked(value)}",
            target,
        )

    def verify_input_value_equals(
        self,
        locator: str,
        expected: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        if expected is None:
            raise validation_error("Expected value cannot be null")
        value = self._resolve(expected, use_external_source, test_case, name or "expected value")
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect_element(
                locator,
                lambda el: el.value or "",
                lambda actual: actual == value,
                timeout,
                f"Value of [{target}]",
                f"'{value}'",
            ),
            channel,
            f"Verify input value equals {masked(value)}",
            target,
        )

    # =========================================================================
    # Page
    # =========================================================================

    def verify_title_equals(self, expected: str, channel: FailureChannel = HARD,
                            timeout: Optional[float] = None):
        require_text(expected, "Expected title")
        return self._run(
            lambda: self._expect(
                lambda session: session.title,
                lambda actual: actual == expected,
                timeout,
                "Page title",
                f"'{expected}'",
            ),
            channel,
            "Verify page title equals",
            expected,
        )

    def verify_title_contains(self, fragment: str, channel: FailureChannel = HARD,
                              timeout: Optional[float] = None):
        require_text(fragment, "Expected title fragment")
        return self._run(
            lambda: self._expect(
                lambda session: session.title or "",
                lambda actual: fragment in actual,
                timeout,
                "Page title",
                f"to contain '{fragment}'",
            ),
            channel,
            "Verify page title contains",
            fragment,
        )

    def verify_url_equals(self, expected: str, channel: FailureChannel = HARD,
                          timeout: Optional[float] = None):
        require_text(expected, "Expected URL")
        return self._run(
            lambda: self._expect(
                lambda session: session.current_url,
                lambda actual: actual == expected,
                timeout,
                "Current URL",
                f"'{expected}'",
            ),
            channel,
            "Verify URL equals",
            expected,
        )

    def verify_url_contains(self, fragment: str, channel: FailureChannel = HARD,
                            timeout: Optional[float] = None):
        require_text(fragment, "Expected URL fragment")
        return self._run(
            lambda: self._expect(
                lambda session: session.current_url or "",
                lambda actual: fragment in actual,
                timeout,
                "Current URL",
                f"to contain '{fragment}'",
            ),
            channel,
            "Verify URL contains",
            fragment,
        )

    def verify_element_count(
        self,
        locator: str,
        expected: int,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        require_text(locator, "Locator")
        target = target_name(locator, name)
        return self._run(
            lambda: self._expect(
                lambda session: len(session.find_elements(locator)),
                lambda actual: actual == expected,
                timeout,
                f"Number of [{target}]",
                f"'{expected}'",
            ),
            channel,
            f"Verify element count is {expected}",
            target,
        )

    def verify_alert_text(
        self,
        expected: str,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """Wait for an alert and verify its text; the alert is left open."""
        require_text(expected, "Expected alert text")
        value = self._resolve(expected, use_external_source, test_case, "alert text")

        def _alert_text(session: AutomationSession) -> str:
            return session.alert_text()

        return self._run(
            lambda: self._expect(
                _alert_text,
                lambda actual: actual == value,
                timeout,
                "Alert text",
                f"'{value}'",
            ),
            channel,
            f"Verify alert text equals {masked(value)}",
            "Alert",
        )


__all__ = [
    "Verifications",
]
