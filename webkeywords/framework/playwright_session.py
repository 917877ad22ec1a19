"""
================================================================================
Playwright Session
================================================================================

AutomationSession implementation on top of the Playwright sync API.

Features:
    - XPath and CSS locators resolved in the active frame
    - Frame focus tracked as the execution context
    - Pages of the browser context exposed as windows
    - JavaScript dialogs answered as they open (see set_dialog_policy) and
      recorded so alerts can be awaited and checked
    - Playwright errors translated to the session error vocabulary

Browser launch and shutdown stay with the caller (e.g. the pytest-playwright
``page`` fixture); this class wraps an existing Page.

Usage:
    session = PlaywrightSession(page)
    keywords = Keywords(session, config)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from loguru import logger
from playwright.sync_api import (
    Dialog,
    ElementHandle as PlaywrightElementHandle,
    Error as PlaywrightError,
    Frame,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .session import (
    ElementNotInteractableError,
    FrameTarget,
    NoAlertPresentError,
    NoSuchFrameError,
    NoSuchWindowError,
    ScriptError,
    SessionError,
    StaleElementError,
)


# Per-interaction actionability timeout; waiting is done by the keyword core
DEFAULT_ACTION_TIMEOUT_MS = 5000

_STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
    "target closed",
)
_NOT_INTERACTABLE_MARKERS = (
    "not visible",
    "not enabled",
    "not editable",
    "intercepts pointer events",
    "outside of the viewport",
)


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise Playwright errors as SessionError subclasses."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise ElementNotInteractableError(f"{action} timed out: {e.message}") from e
    except PlaywrightError as e:
        message = (e.message or "").lower()
        if any(marker in message for marker in _STALE_MARKERS):
            raise StaleElementError(f"{action}: {e.message}") from e
        if any(marker in message for marker in _NOT_INTERACTABLE_MARKERS):
            raise ElementNotInteractableError(f"{action}: {e.message}") from e
        raise SessionError(f"{action}: {e.message}") from e


def to_selector(locator: str) -> str:
    """XPath expressions get an explicit ``xpath=`` prefix; other selectors pass through."""
    stripped = locator.strip()
    if stripped.startswith(("/", "(", "./", "..")):
        return f"xpath={stripped}"
    return stripped


@dataclass
class DialogPolicy:
    """How the session answers dialogs when they open."""
    accept: bool = True
    prompt_text: Optional[str] = None


@dataclass
class HandledDialog:
    """A dialog the session has already answered."""
    message: str
    kind: str
    accepted: bool
    prompt_text: Optional[str] = None

class PlaywrightElement:
    """ElementHandle implementation wrapping a Playwright element handle."""

    def __init__(self, handle: PlaywrightElementHandle, page: Page, timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS):
        self.handle = handle
        self._page = page
        self._timeout_ms = timeout_ms

    @property
    def text(self) -> str:
        with translate_errors("read text"):
            return self.handle.inner_text()

    @property
    def value(self) -> Optional[str]:
        with translate_errors("read value"):
            return self.handle.evaluate("el => (el.value === undefined ? null : String(el.value))")

    def is_displayed(self) -> bool:
        with translate_errors("check visibility"):
            return self.handle.is_visible()

    def is_enabled(self) -> bool:
        with translate_errors("check enabled state"):
            return self.handle.is_enabled()

    def is_selected(self) -> bool:
        with translate_errors("check selected state"):
            return bool(self.handle.evaluate("el => Boolean(el.selected || el.checked)"))

    def get_attribute(self, name: str) -> Optional[str]:
        with translate_errors(f"read attribute '{name}'"):
            return self.handle.get_attribute(name)

    def click(self) -> None:
        with translate_errors("click"):
            self.handle.click(timeout=self._timeout_ms)

    def double_click(self) -> None:
        with translate_errors("double click"):
            self.handle.dblclick(timeout=self._timeout_ms)

    def right_click(self) -> None:
        with translate_errors("right click"):
            self.handle.click(button="right", timeout=self._timeout_ms)

    def hover(self) -> None:
        with translate_errors("hover"):
            self.handle.hover(timeout=self._timeout_ms)

    def drag_to(self, target: "PlaywrightElement") -> None:
        with translate_errors("drag and drop"):
            self.handle.hover(timeout=self._timeout_ms)
            self._page.mouse.down()
            target.handle.hover(timeout=self._timeout_ms)
            self._page.mouse.up()

    def clear(self) -> None:
        with translate_errors("clear"):
            self.handle.fill("", timeout=self._timeout_ms)

    def send_keys(self, text: str) -> None:
        with translate_errors("type text"):
            self.handle.focus()
            self._page.keyboard.type(text)

    def press(self, key: str) -> None:
        with translate_errors(f"press '{key}'"):
            self.handle.press(key, timeout=self._timeout_ms)

    def select_option(
        self,
        value: Optional[str] = None,
        label: Optional[str] = None,
        index: Optional[int] = None,
    ) -> None:
        with translate_errors("select option"):
            if value is not None:
                self.handle.select_option(value=value, timeout=self._timeout_ms)
            elif label is not None:
                self.handle.select_option(label=label, timeout=self._timeout_ms)
            else:
                self.handle.select_option(index=index, timeout=self._timeout_ms)

    def scroll_into_view(self) -> None:
        with translate_errors("scroll into view"):
            self.handle.scroll_into_view_if_needed(timeout=self._timeout_ms)


class PlaywrightSession:
    """
    AutomationSession backed by a Playwright Page.

    The active frame starts as the page's main frame and changes only through
    the switch_* methods.
    """

    def __init__(self, page: Page, action_timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS):
        """
        Initialize session.

        Args:
            page: Playwright Page to drive
            action_timeout_ms: Actionability timeout for single interactions
        """
        self.action_timeout_ms = action_timeout_ms
        self._page = page
        self._frame: Frame = page.main_frame
        self.dialog_policy = DialogPolicy()
        self._dialogs: Dict[int, List[HandledDialog]] = {}
        self._handles: Dict[int, str] = {}
        self._watch_dialogs(page)

    # =========================================================================
    # Elements
    # =========================================================================

    def find_elements(self, locator: str) -> List[PlaywrightElement]:
        with translate_errors(f"find '{locator}'"):
            handles = self._frame.query_selector_all(to_selector(locator))
        return [self._wrap(h) for h in handles]

    def find_child_elements(self, parent: PlaywrightElement, locator: str) -> List[PlaywrightElement]:
        with translate_errors(f"find child '{locator}'"):
            handles = parent.handle.query_selector_all(to_selector(locator))
        return [self._wrap(h) for h in handles]

    def _wrap(self, handle: PlaywrightElementHandle) -> PlaywrightElement:
        return PlaywrightElement(handle, self._page, self.action_timeout_ms)

    # =========================================================================
    # Page
    # =========================================================================

    @property
    def page(self) -> Page:
        return self._page

    @property
    def title(self) -> str:
        with translate_errors("read title"):
            return self._page.title()

    @property
    def current_url(self) -> str:
        return self._page.url

    def navigate(self, url: str) -> None:
        with translate_errors(f"navigate to {url}"):
            self._page.goto(url)
        self._frame = self._page.main_frame

    def refresh(self) -> None:
        with translate_errors("refresh"):
            self._page.reload()
        self._frame = self._page.main_frame

    def back(self) -> None:
        with translate_errors("go back"):
            self._page.go_back()
        self._frame = self._page.main_frame

    def forward(self) -> None:
        with translate_errors("go forward"):
            self._page.go_forward()
        self._frame = self._page.main_frame

    def execute_script(self, script: str, *args: Any) -> Any:
        """
        Run a WebDriver-style script body (``return ...``, ``arguments[0]``).

        Element arguments are passed through as Playwright handles.
        """
        js_args = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        wrapped = f"(args) => (function() {{ {script} }}).apply(null, args)"
        try:
            return self._frame.evaluate(wrapped, js_args)
        except PlaywrightError as e:
            raise ScriptError(f"Script failed: {e.message}") from e

    def press_key(self, key: str) -> None:
        with translate_errors(f"press '{key}'"):
            self._page.keyboard.press(key)

    # =========================================================================
    # Frames
    # =========================================================================

    def switch_to_frame(self, target: FrameTarget) -> None:
        frame: Optional[Frame] = None
        children = self._frame.child_frames

        if isinstance(target, int):
            if 0 <= target < len(children):
                frame = children[target]
        elif isinstance(target, PlaywrightElement):
            with translate_errors("resolve frame element"):
                frame = target.handle.content_frame()
        else:
            frame = next((f for f in children if f.name == target), None)
            if frame is None:
                elements = self.find_elements(target)
                if elements:
                    with translate_errors("resolve frame element"):
                        frame = elements[0].handle.content_frame()

        if frame is None:
            raise NoSuchFrameError(f"No frame matching {target!r} in {self.current_context()}")
        self._frame = frame
        logger.debug(f"Switched to {self.current_context()}")

    def switch_to_parent_frame(self) -> None:
        self._frame = self._frame.parent_frame or self._page.main_frame

    def switch_to_default_content(self) -> None:
        self._frame = self._page.main_frame

    def current_context(self) -> str:
        window = self._handle_for(self._page)
        if self._frame == self._page.main_frame:
            return f"{window} main frame"
        label = self._frame.name or self._frame.url
        return f"{window} frame '{label}'"

    # =========================================================================
    # Windows
    # =========================================================================

    def window_handles(self) -> Sequence[str]:
        return [self._handle_for(p) for p in self._page.context.pages]

    def switch_to_window(self, handle: str) -> None:
        for candidate in self._page.context.pages:
            if self._handle_for(candidate) == handle:
                self._page = candidate
                self._frame = candidate.main_frame
                self._watch_dialogs(candidate)
                candidate.bring_to_front()
                return
        raise NoSuchWindowError(f"No window with handle '{handle}'")

    def _handle_for(self, page: Page) -> str:
        key = id(page)
        if key not in self._handles:
            self._handles[key] = f"window-{len(self._handles)}"
        return self._handles[key]

    # =========================================================================
    # Alerts
    # =========================================================================
    #
    # A dialog blocks the page until it is answered, so the listener answers
    # it as soon as it opens, following ``dialog_policy``, and records it.
    # The alert methods then read and acknowledge the recorded dialogs.

    def set_dialog_policy(self, accept: bool = True, prompt_text: Optional[str] = None) -> None:
        """
        Choose how dialogs opened from now on are answered.

        Args:
            accept: Accept (True) or dismiss (False) each dialog
            prompt_text: Text entered into prompt dialogs before accepting
        """
        self.dialog_policy = DialogPolicy(accept=accept, prompt_text=prompt_text)

    def _watch_dialogs(self, page: Page) -> None:
        key = id(page)
        if key in self._dialogs:
            return
        self._dialogs[key] = []
        page.on("dialog", lambda dialog: self._on_dialog(key, dialog))

    def _on_dialog(self, key: int, dialog: Dialog) -> None:
        policy = self.dialog_policy
        record = HandledDialog(
            message=dialog.message,
            kind=dialog.type,
            accepted=policy.accept,
            prompt_text=policy.prompt_text if policy.accept else None,
        )
        self._dialogs[key].append(record)
        if not policy.accept:
            dialog.dismiss()
        elif policy.prompt_text is not None:
            dialog.accept(policy.prompt_text)
        else:
            dialog.accept()
        logger.debug(f"{'Accepted' if record.accepted else 'Dismissed'} {record.kind} dialog '{record.message}'")

    def _current_dialog(self) -> HandledDialog:
        pending = self._dialogs.get(id(self._page), [])
        if not pending:
            raise NoAlertPresentError("No alert is open")
        return pending[0]

    def _acknowledge(self, accepted: bool) -> None:
        record = self._current_dialog()
        if record.accepted != accepted:
            answered = "accepted" if record.accepted else "dismissed"
            raise SessionError(
                f"Dialog '{record.message}' was already {answered} when it opened; "
                f"call set_dialog_policy(accept={accepted}) before triggering it"
            )
        self._dialogs[id(self._page)].pop(0)

    def alert_text(self) -> str:
        return self._current_dialog().message

    def accept_alert(self) -> None:
        self._acknowledge(accepted=True)

    def dismiss_alert(self) -> None:
        self._acknowledge(accepted=False)

    def send_alert_text(self, text: str) -> None:
        record = self._current_dialog()
        if record.prompt_text != text:
            raise SessionError(
                f"Dialog '{record.message}' was answered with {record.prompt_text!r}; "
                f"call set_dialog_policy(prompt_text={text!r}) before triggering it"
            )


__all__ = [
    "PlaywrightSession",
    "PlaywrightElement",
    "DialogPolicy",
    "HandledDialog",
    "translate_errors",
    "to_selector",
    "DEFAULT_ACTION_TIMEOUT_MS",
]
