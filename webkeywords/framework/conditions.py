"""
================================================================================
Wait Conditions
================================================================================

Element readiness predicates and session-level conditions used with the
polling wait engine.

Readiness predicates take an element handle and answer yes/no; they compose
with ``&`` and ``|``:

    >>> CLICKABLE = VISIBLE & ENABLED
    >>> finder.find_element("//button", readiness=CLICKABLE & text_contains("Go"))

Session conditions take the session and return a truthy value on success.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .session import (
    AutomationSession,
    ElementHandle,
    NoSuchWindowError,
    StaleElementError,
)


class Readiness:
    """
    Named element predicate.

    Attributes:
        name: Description used in log and error messages
        check: Callable returning True when the element is ready
    """

    def __init__(self, name: str, check: Callable[[ElementHandle], bool]):
        self.name = name
        self._check = check

    def __call__(self, element: ElementHandle) -> bool:
        return bool(self._check(element))

    def __and__(self, other: "Readiness") -> "Readiness":
        return Readiness(
            f"{self.name} and {other.name}",
            lambda el: self(el) and other(el),
        )

    def __or__(self, other: "Readiness") -> "Readiness":
        return Readiness(
            f"{self.name} or {other.name}",
            lambda el: self(el) or other(el),
        )

    def __repr__(self) -> str:
        return f"Readiness({self.name!r})"


PRESENT = Readiness("present", lambda el: True)
VISIBLE = Readiness("visible", lambda el: el.is_displayed())
ENABLED = Readiness("enabled", lambda el: el.is_enabled())
DISABLED = Readiness("disabled", lambda el: not el.is_enabled())
SELECTED = Readiness("selected", lambda el: el.is_selected())
NOT_SELECTED = Readiness("not selected", lambda el: not el.is_selected())
CLICKABLE = VISIBLE & ENABLED


def text_equals(expected: str) -> Readiness:
    return Readiness(
        f"text equals '{expected}'",
        lambda el: (el.text or "").strip() == expected.strip(),
    )


def text_contains(fragment: str) -> Readiness:
    return Readiness(f"text contains '{fragment}'", lambda el: fragment in (el.text or ""))


def attribute_equals(name: str, expected: str) -> Readiness:
    return Readiness(
        f"attribute '{name}' equals '{expected}'",
        lambda el: el.get_attribute(name) == expected,
    )


def attribute_contains(name: str, fragment: str) -> Readiness:
    return Readiness(
        f"attribute '{name}' contains '{fragment}'",
        lambda el: fragment in (el.get_attribute(name) or ""),
    )


def value_equals(expected: str) -> Readiness:
    return Readiness(f"value equals '{expected}'", lambda el: (el.value or "") == expected)


def value_contains(fragment: str) -> Readiness:
    return Readiness(f"value contains '{fragment}'", lambda el: fragment in (el.value or ""))


# =============================================================================
# Session conditions
# =============================================================================

SessionCondition = Callable[[AutomationSession], Any]


def title_is(expected: str) -> SessionCondition:
    return lambda session: session.title == expected


def title_contains(fragment: str) -> SessionCondition:
    return lambda session: fragment in (session.title or "")


def url_is(expected: str) -> SessionCondition:
    return lambda session: session.current_url == expected


def url_contains(fragment: str) -> SessionCondition:
    return lambda session: fragment in (session.current_url or "")


def alert_present() -> SessionCondition:
    """
    Succeeds with the alert text once a dialog is open.

    Sessions raise NoAlertPresentError while no dialog is open; an open
    dialog with empty text still counts as present.
    """
    def _condition(session: AutomationSession) -> Any:
        text = session.alert_text()
        return text if text else True
    return _condition


def number_of_windows_to_be(expected: int) -> SessionCondition:
    return lambda session: len(session.window_handles()) == expected


def window_available(index_or_handle: Any) -> SessionCondition:
    """Resolve a window by position or handle, raising until it exists."""
    def _condition(session: AutomationSession) -> Optional[str]:
        handles = list(session.window_handles())
        if isinstance(index_or_handle, int):
            if 0 <= index_or_handle < len(handles):
                return handles[index_or_handle]
        elif index_or_handle in handles:
            return index_or_handle
        raise NoSuchWindowError(f"Window '{index_or_handle}' not available; open windows: {len(handles)}")
    return _condition


def element_count_to_be(locator: str, expected: int) -> SessionCondition:
    return lambda session: len(session.find_elements(locator)) == expected


def invisibility_of(locator: str) -> SessionCondition:
    """True once no match of ``locator`` is displayed; stale handles count as gone."""
    def _condition(session: AutomationSession) -> bool:
        for element in session.find_elements(locator):
            try:
                if element.is_displayed():
                    return False
            except StaleElementError:
                continue
        return True
    return _condition


def absence_of(locator: str) -> SessionCondition:
    return lambda session: len(session.find_elements(locator)) == 0


def javascript_returns_true(script: str) -> SessionCondition:
    return lambda session: bool(session.execute_script(script))


__all__ = [
    "Readiness",
    "PRESENT",
    "VISIBLE",
    "ENABLED",
    "DISABLED",
    "SELECTED",
    "NOT_SELECTED",
    "CLICKABLE",
    "text_equals",
    "text_contains",
    "attribute_equals",
    "attribute_contains",
    "value_equals",
    "value_contains",
    "title_is",
    "title_contains",
    "url_is",
    "url_contains",
    "alert_present",
    "number_of_windows_to_be",
    "window_available",
    "element_count_to_be",
    "invisibility_of",
    "absence_of",
    "javascript_returns_true",
]
