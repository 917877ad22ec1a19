"""
In-memory automation session for unit tests.

FakeElement and FakeSession implement the session protocols with plain
attributes. Any state attribute may be a zero-argument callable, which lets a
test tie element state to the fake clock (e.g. "visible after 2 seconds").
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from webkeywords.framework.session import (
    NoAlertPresentError,
    NoSuchFrameError,
    NoSuchWindowError,
    StaleElementError,
)


def _read(value: Any) -> Any:
    return value() if callable(value) else value


class FakeClock:
    """Deterministic replacement for time.monotonic/time.sleep."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    @property
    def total_slept(self) -> float:
        return sum(self.sleeps)


class FakeElement:
    def __init__(
        self,
        text: Any = "",
        value: Any = None,
        displayed: Any = True,
        enabled: Any = True,
        selected: Any = False,
        attributes: Optional[Dict[str, Any]] = None,
        stale: Any = False,
        click_error: Optional[Callable[[], BaseException]] = None,
        name: str = "element",
    ):
        self._text = text
        self._value = value
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.attributes = dict(attributes or {})
        self.stale = stale
        self.click_error = click_error
        self.name = name
        self.children: Dict[str, Any] = {}
        self.actions: List[Any] = []

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"

    def _check(self) -> None:
        if _read(self.stale):
            raise StaleElementError(f"{self.name} is no longer attached to the DOM")

    @property
    def text(self) -> str:
        self._check()
        return _read(self._text)

    @property
    def value(self) -> Optional[str]:
        self._check()
        return _read(self._value)

    def is_displayed(self) -> bool:
        self._check()
        return bool(_read(self.displayed))

    def is_enabled(self) -> bool:
        self._check()
        return bool(_read(self.enabled))

    def is_selected(self) -> bool:
        self._check()
        return bool(_read(self.selected))

    def get_attribute(self, name: str) -> Optional[str]:
        self._check()
        return _read(self.attributes.get(name))

    def click(self) -> None:
        self._check()
        if self.click_error is not None:
            raise self.click_error()
        self.actions.append("click")

    def double_click(self) -> None:
        self._check()
        self.actions.append("double_click")

    def right_click(self) -> None:
        self._check()
        self.actions.append("right_click")

    def hover(self) -> None:
        self._check()
        self.actions.append("hover")

    def drag_to(self, target: "FakeElement") -> None:
        self._check()
        target._check()
        self.actions.append(("drag_to", target.name))

    def clear(self) -> None:
        self._check()
        self._value = ""
        self.actions.append("clear")

    def send_keys(self, text: str) -> None:
        self._check()
        self._value = (_read(self._value) or "") + text
        self.actions.append(("send_keys", text))

    def press(self, key: str) -> None:
        self._check()
        self.actions.append(("press", key))

    def select_option(self, value=None, label=None, index=None) -> None:
        self._check()
        self.actions.append(("select", {"value": value, "label": label, "index": index}))

    def scroll_into_view(self) -> None:
        self._check()
        self.actions.append("scroll")


class FakeSession:
    def __init__(
        self,
        elements: Optional[Dict[str, Any]] = None,
        title: Any = "",
        url: Any = "about:blank",
    ):
        self.elements: Dict[str, Any] = dict(elements or {})
        self._title = title
        self._url = url
        self.find_calls: List[str] = []
        self.frames: Dict[Any, Any] = {}
        self.context_stack: List[str] = []
        self.windows: Any = ["window-0"]
        self.current_window = "window-0"
        self.alerts: List[str] = []
        self.alert_actions: List[Any] = []
        self.scripts: List[Any] = []
        self.script_handler: Optional[Callable[..., Any]] = None
        self.keys: List[str] = []
        self.history: List[str] = []

    # Elements

    def find_elements(self, locator: str) -> List[FakeElement]:
        self.find_calls.append(locator)
        return list(_read(self.elements.get(locator, [])))

    def find_child_elements(self, parent: FakeElement, locator: str) -> List[FakeElement]:
        parent._check()
        self.find_calls.append(f"{parent.name} >> {locator}")
        return list(_read(parent.children.get(locator, [])))

    # Page

    @property
    def title(self) -> str:
        return _read(self._title)

    @property
    def current_url(self) -> str:
        return _read(self._url)

    def navigate(self, url: str) -> None:
        self.history.append(url)
        self._url = url
        self.context_stack.clear()

    def refresh(self) -> None:
        self.history.append("refresh")

    def back(self) -> None:
        self.history.append("back")

    def forward(self) -> None:
        self.history.append("forward")

    def execute_script(self, script: str, *args: Any) -> Any:
        self.scripts.append((script, args))
        if self.script_handler is not None:
            return self.script_handler(script, *args)
        return None

    def press_key(self, key: str) -> None:
        self.keys.append(key)

    # Frames

    def switch_to_frame(self, target: Any) -> None:
        if target not in self.frames or not _read(self.frames[target]):
            raise NoSuchFrameError(f"No frame {target!r}")
        self.context_stack.append(str(target))

    def switch_to_parent_frame(self) -> None:
        if self.context_stack:
            self.context_stack.pop()

    def switch_to_default_content(self) -> None:
        self.context_stack.clear()

    def current_context(self) -> str:
        frame = f"frame '{self.context_stack[-1]}'" if self.context_stack else "main frame"
        return f"{self.current_window} {frame}"

    # Windows

    def window_handles(self) -> List[str]:
        return list(_read(self.windows))

    def switch_to_window(self, handle: str) -> None:
        if handle not in self.window_handles():
            raise NoSuchWindowError(f"No window {handle!r}")
        self.current_window = handle
        self.context_stack.clear()

    # Alerts

    def alert_text(self) -> str:
        if not self.alerts:
            raise NoAlertPresentError("No alert is open")
        return self.alerts[0]

    def accept_alert(self) -> None:
        self.alert_actions.append(("accept", self.alert_text()))
        self.alerts.pop(0)

    def dismiss_alert(self) -> None:
        self.alert_actions.append(("dismiss", self.alert_text()))
        self.alerts.pop(0)

    def send_alert_text(self, text: str) -> None:
        self.alert_text()
        self.alert_actions.append(("send", text))
