# ================================================================================
# Element Action Keywords
# ================================================================================
#
# Pointer and keyboard interactions on page elements.
#
# Every keyword resolves its element through the ElementFinder (waiting for
# the readiness the action needs) and runs through execute(), so the same
# keyword serves Hard, Soft and Silent callers:
#
#   keywords.click("//button[@id='go']", "Go button")
#   ok = keywords.click("//button[@id='go']", "Go button", channel=FailureChannel.SOFT)
#
# ================================================================================

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..framework.conditions import CLICKABLE, PRESENT, VISIBLE
from ..framework.exceptions import FrameworkError, TimeoutExceeded, require_text, validation_error
from ..framework.execution import FailureChannel
from ..framework.retry import RetryPolicy, retry
from .base import KeywordGroup, masked, target_name


HARD = FailureChannel.HARD

SELECT_BY_LABEL = "label"
SELECT_BY_VALUE = "value"
SELECT_BY_INDEX = "index"


class ElementActions(KeywordGroup):
    """Click, type, select and read keywords."""

    # =========================================================================
    # Clicks
    # =========================================================================

    def click(
        self,
        locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Click an element once it is visible and enabled.

        Args:
            locator: Locator expression
            name: Element name for reporting
            channel: Failure channel
            timeout: Timeout in seconds (configuration default if None)
        """
        return self._run(
            lambda: self.finder.find_element(locator, CLICKABLE, timeout).click(),
            channel,
            "Click element",
            target_name(locator, name),
        )

    def double_click(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                     timeout: Optional[float] = None):
        return self._run(
            lambda: self.finder.find_element(locator, CLICKABLE, timeout).double_click(),
            channel,
            "Double click element",
            target_name(locator, name),
        )

    def right_click(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                    timeout: Optional[float] = None):
        return self._run(
            lambda: self.finder.find_element(locator, CLICKABLE, timeout).right_click(),
            channel,
            "Right click element",
            target_name(locator, name),
        )

    def hover(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
              timeout: Optional[float] = None):
        return self._run(
            lambda: self.finder.find_element(locator, VISIBLE, timeout).hover(),
            channel,
            "Hover over element",
            target_name(locator, name),
        )

    def click_with_retry(
        self,
        locator: str,
        name: Optional[str] = None,
        max_retries: int = 3,
        timeout: Optional[float] = None,
        channel: FailureChannel = HARD,
    ):
        """
        Click with whole-action retries.

        Each attempt re-acquires the element (waiting up to ``timeout``) and
        clicks it. Attempt i waits ``retry.base_delay_millis * (i - 1)`` first.

        Args:
            locator: Locator expression
            name: Element name for reporting
            max_retries: Total number of attempts, at least 1
            timeout: Per-attempt acquisition timeout in seconds
            channel: Failure channel
        """
        target = target_name(locator, name)
        policy = RetryPolicy.from_config(self.config, max_attempts=max_retries)

        def _attempt() -> None:
            self.finder.find_element(locator, CLICKABLE, timeout).click()

        return self._run(
            lambda: retry(_attempt, policy, description=f"click on {target}"),
            channel,
            f"Click element with up to {max_retries} attempts",
            target,
        )

    def click_if_visible(
        self,
        locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Click an element only if it becomes clickable in time.

        Returns:
            True if clicked, False if the element never showed up
        """
        target = target_name(locator, name)

        def _click_if_visible() -> bool:
            try:
                element = self.finder.find_element(locator, CLICKABLE, timeout)
            except TimeoutExceeded:
                logger.info(f"Element [{target}] not visible, skipping click")
                return False
            element.click()
            return True

        return self._run(_click_if_visible, channel, "Click element if visible", target, returns_value=True)

    def click_child(
        self,
        parent_locator: str,
        child_locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
        child_timeout: Optional[float] = None,
    ):
        """Click a descendant of a parent element; parent and child wait independently."""
        return self._run(
            lambda: self.finder.find_child(
                parent_locator,
                child_locator,
                CLICKABLE,
                parent_timeout=timeout,
                child_timeout=child_timeout if child_timeout is not None else timeout,
            ).click(),
            channel,
            "Click child element",
            name or f"{parent_locator} >> {child_locator}",
        )

    def click_by_index(
        self,
        locator: str,
        index: int,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Click the match at ``index`` (0-based).

        Raises:
            FrameworkError: kind VALIDATION when index is out of range
        """
        return self._run(
            lambda: self.finder.element_at(locator, index, CLICKABLE, timeout).click(),
            channel,
            f"Click element at index {index}",
            target_name(locator, name),
        )

    def click_all(
        self,
        locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Click every match of ``locator`` in document order.

        The k-th match is resolved again right before it is clicked, so a
        click that re-renders the list does not leave stale handles behind.

        Returns:
            Number of elements clicked
        """
        target = target_name(locator, name)

        def _click_all() -> int:
            total = len(self.finder.find_elements(locator, PRESENT, timeout))
            for index in range(total):
                remaining = self.finder.count(locator)
                if index >= remaining:
                    raise FrameworkError(
                        f"Matches of '{locator}' dropped to {remaining} after {index} of {total} clicks"
                    )
                self.finder.element_at(locator, index, CLICKABLE, timeout).click()
            logger.debug(f"Clicked {total} elements matching '{locator}'")
            return total

        return self._run(_click_all, channel, "Click all elements", target, returns_value=True)

    def click_using_js(
        self,
        locator: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """Click through JavaScript; works on elements covered by overlays."""
        def _js_click() -> None:
            element = self.finder.find_element(locator, PRESENT, timeout)
            self.session.execute_script("arguments[0].click();", element)

        return self._run(_js_click, channel, "Click element using JavaScript", target_name(locator, name))

    # =========================================================================
    # Mouse and scrolling
    # =========================================================================

    def drag_and_drop(
        self,
        source_locator: str,
        target_locator: str,
        source_desc: Optional[str] = None,
        target_desc: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Drag an element and drop it onto another element.

        Both elements must be visible; each gets its own wait of ``timeout``.

        Args:
            source_locator: Locator of the element to drag
            target_locator: Locator of the drop target
            source_desc: Source name for reporting
            target_desc: Target name for reporting
            channel: Failure channel
            timeout: Timeout in seconds (configuration default if None)
        """
        source = target_name(source_locator, source_desc)
        target = target_name(target_locator, target_desc)

        def _drag() -> None:
            dragged = self.finder.find_element(source_locator, VISIBLE, timeout)
            drop_zone = self.finder.find_element(target_locator, VISIBLE, timeout)
            logger.info(f"Dragging from {source} to {target}")
            dragged.drag_to(drop_zone)

        return self._run(_drag, channel, "Drag and drop element", f"{source} -> {target}")

    def scroll_to_element(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                          timeout: Optional[float] = None):
        return self._run(
            lambda: self.finder.find_element(locator, PRESENT, timeout).scroll_into_view(),
            channel,
            "Scroll to element",
            target_name(locator, name),
        )

    # =========================================================================
    # Text input
    # =========================================================================

    def enter_text(
        self,
        locator: str,
        text: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Clear an input and type text into it.

        Args:
            locator: Locator expression
            text: Literal text, or a data key when use_external_source is True
            name: Element name for reporting
            use_external_source: Resolve ``text`` through the data source
            test_case: Test case name for the data source lookup
            channel: Failure channel
            timeout: Timeout in seconds (configuration default if None)
        """
        require_text(text, "Text")
        value = self._resolve(text, use_external_source, test_case, name or "text")

        def _enter() -> None:
            element = self.finder.find_element(locator, VISIBLE, timeout)
            element.clear()
            element.send_keys(value)

        return self._run(_enter, channel, f"Enter text {masked(value)}", target_name(locator, name))

    def append_text(
        self,
        locator: str,
        text: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """Type text after the input's current content."""
        require_text(text, "Text")
        value = self._resolve(text, use_external_source, test_case, name or "text")
        return self._run(
            lambda: self.finder.find_element(locator, VISIBLE, timeout).send_keys(value),
            channel,
            f"Append text {masked(value)}",
            target_name(locator, name),
        )

    def clear_text(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                   timeout: Optional[float] = None):
        return self._run(
            lambda: self.finder.find_element(locator, VISIBLE, timeout).clear(),
            channel,
            "Clear text",
            target_name(locator, name),
        )

    def enter_text_and_press_key(
        self,
        locator: str,
        text: str,
        key: str,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """Clear, type, then press a key (e.g. "Enter") in the same element."""
        require_text(text, "Text")
        require_text(key, "Key")
        value = self._resolve(text, use_external_source, test_case, name or "text")

        def _enter_and_press() -> None:
            element = self.finder.find_element(locator, VISIBLE, timeout)
            element.clear()
            element.send_keys(value)
            element.press(key)

        return self._run(
            _enter_and_press,
            channel,
            f"Enter text {masked(value)} and press {key}",
            target_name(locator, name),
        )

    # =========================================================================
    # Select
    # =========================================================================

    def select_option(
        self,
        locator: str,
        option: str,
        by: str = SELECT_BY_LABEL,
        name: Optional[str] = None,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Select a dropdown option by visible label, value or index.

        Raises:
            FrameworkError: kind VALIDATION for an unknown ``by`` or a
                non-numeric index
        """
        if by not in (SELECT_BY_LABEL, SELECT_BY_VALUE, SELECT_BY_INDEX):
            raise validation_error(f"Unsupported select strategy '{by}', use label, value or index")
        require_text(option, "Option")
        value = self._resolve(option, use_external_source, test_case, name or "option")

        if by == SELECT_BY_INDEX:
            try:
                selection = {"index": int(value)}
            except ValueError:
                raise validation_error(f"Option index must be a number, got '{value}'")
        else:
            selection = {by: value}

        return self._run(
            lambda: self.finder.find_element(locator, CLICKABLE, timeout).select_option(**selection),
            channel,
            f"Select option by {by} {masked(value)}",
            target_name(locator, name),
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def get_text(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                 timeout: Optional[float] = None) -> Optional[str]:
        """
        Visible text of an element.

        Returns:
            The text; None for a Soft failure
        """
        return self._run(
            lambda: (self.finder.find_element(locator, VISIBLE, timeout).text or "").strip(),
            channel,
            "Get text",
            target_name(locator, name),
            soft_failure_value=None,
        )

    def get_attribute(
        self,
        locator: str,
        attribute: str,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        require_text(attribute, "Attribute name")
        return self._run(
            lambda: self.finder.find_element(locator, PRESENT, timeout).get_attribute(attribute),
            channel,
            f"Get attribute '{attribute}'",
            target_name(locator, name),
            soft_failure_value=None,
        )

    def get_input_value(self, locator: str, name: Optional[str] = None, channel: FailureChannel = HARD,
                        timeout: Optional[float] = None) -> Optional[str]:
        return self._run(
            lambda: self.finder.find_element(locator, PRESENT, timeout).value,
            channel,
            "Get input value",
            target_name(locator, name),
            soft_failure_value=None,
        )


__all__ = [
    "ElementActions",
    "SELECT_BY_LABEL",
    "SELECT_BY_VALUE",
    "SELECT_BY_INDEX",
]
