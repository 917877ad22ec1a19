"""
================================================================================
Automation Session Interface
================================================================================

The browser session is a collaborator: the keyword core only talks to it
through the two protocols below and never owns its state. The active
frame/window of the session is the execution context every locator is
resolved against.

Errors raised by a session use the vocabulary defined here so that the wait
engine can tell "not ready yet" apart from real failures.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, Union


# =============================================================================
# Session errors
# =============================================================================

class SessionError(Exception):
    """Base class for errors reported by the automation session."""
    pass


class NoSuchElementError(SessionError):
    """No element matches the locator (yet)."""
    pass


class StaleElementError(SessionError):
    """An element handle no longer refers to a node in the document."""
    pass


class NoAlertPresentError(SessionError):
    """No JavaScript dialog is currently open."""
    pass


class NoSuchFrameError(SessionError):
    """The requested frame does not exist (yet)."""
    pass


class NoSuchWindowError(SessionError):
    """The requested window does not exist (yet)."""
    pass


class ElementNotInteractableError(SessionError):
    """The element exists but cannot receive the interaction."""
    pass


class ScriptError(SessionError):
    """Injected JavaScript raised an error."""
    pass


# Errors treated as "not ready yet" while polling
TRANSIENT_ERRORS = (
    NoSuchElementError,
    StaleElementError,
    NoAlertPresentError,
    NoSuchFrameError,
    NoSuchWindowError,
)


# =============================================================================
# Protocols
# =============================================================================

class ElementHandle(Protocol):
    """
    Reference to a node resolved at a specific instant.

    Any method may raise StaleElementError once the document has mutated.
    """

    @property
    def text(self) -> str: ...

    @property
    def value(self) -> Optional[str]: ...

    def is_displayed(self) -> bool: ...

    def is_enabled(self) -> bool: ...

    def is_selected(self) -> bool: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def click(self) -> None: ...

    def double_click(self) -> None: ...

    def right_click(self) -> None: ...

    def hover(self) -> None: ...

    def drag_to(self, target: "ElementHandle") -> None: ...

    def clear(self) -> None: ...

    def send_keys(self, text: str) -> None: ...

    def press(self, key: str) -> None: ...

    def select_option(
        self,
        value: Optional[str] = None,
        label: Optional[str] = None,
        index: Optional[int] = None,
    ) -> None: ...

    def scroll_into_view(self) -> None: ...


FrameTarget = Union[int, str, ElementHandle]


class AutomationSession(Protocol):
    """Capabilities the keyword core needs from a browser session."""

    @property
    def title(self) -> str: ...

    @property
    def current_url(self) -> str: ...

    def find_elements(self, locator: str) -> List[ElementHandle]: ...

    def find_child_elements(self, parent: ElementHandle, locator: str) -> List[ElementHandle]: ...

    def navigate(self, url: str) -> None: ...

    def refresh(self) -> None: ...

    def back(self) -> None: ...

    def forward(self) -> None: ...

    def execute_script(self, script: str, *args: Any) -> Any: ...

    def switch_to_frame(self, target: FrameTarget) -> None: ...

    def switch_to_parent_frame(self) -> None: ...

    def switch_to_default_content(self) -> None: ...

    def current_context(self) -> str: ...

    def window_handles(self) -> Sequence[str]: ...

    def switch_to_window(self, handle: str) -> None: ...

    def alert_text(self) -> str: ...

    def accept_alert(self) -> None: ...

    def dismiss_alert(self) -> None: ...

    def send_alert_text(self, text: str) -> None: ...

    def press_key(self, key: str) -> None: ...


__all__ = [
    "SessionError",
    "NoSuchElementError",
    "StaleElementError",
    "NoAlertPresentError",
    "NoSuchFrameError",
    "NoSuchWindowError",
    "ElementNotInteractableError",
    "ScriptError",
    "TRANSIENT_ERRORS",
    "ElementHandle",
    "AutomationSession",
    "FrameTarget",
]
