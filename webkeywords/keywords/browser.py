"""
================================================================================
Browser Keywords
================================================================================

Navigation, frame/window context switching, alerts, script execution and
page-level key presses.

Context switches change what every later locator is resolved against. They
wait for their target (frame, window, alert) to exist, then switch; nothing
switches back automatically.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional, Union

from loguru import logger

from ..framework.conditions import alert_present, window_available
from ..framework.exceptions import require_text, validation_error
from ..framework.execution import FailureChannel
from ..framework.session import AutomationSession, FrameTarget
from .base import KeywordGroup, masked


HARD = FailureChannel.HARD


class BrowserActions(KeywordGroup):
    """Page navigation and context keywords."""

    # =========================================================================
    # Navigation
    # =========================================================================

    def navigate_to(self, url: str, channel: FailureChannel = HARD):
        require_text(url, "URL")
        return self._run(lambda: self.session.navigate(url), channel, "Navigate to URL", url)

    def refresh(self, channel: FailureChannel = HARD):
        return self._run(self.session.refresh, channel, "Refresh page", "Browser")

    def back(self, channel: FailureChannel = HARD):
        return self._run(self.session.back, channel, "Navigate back", "Browser")

    def forward(self, channel: FailureChannel = HARD):
        return self._run(self.session.forward, channel, "Navigate forward", "Browser")

    # =========================================================================
    # Frames
    # =========================================================================

    def switch_to_frame(
        self,
        frame: FrameTarget,
        name: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Wait for a frame and make it the current context.

        Args:
            frame: Frame index, frame name, or locator of the frame element
            name: Frame name for reporting
            channel: Failure channel
            timeout: Timeout in seconds (configuration default if None)
        """
        if frame is None or (isinstance(frame, str) and not frame.strip()):
            raise validation_error("Frame cannot be null or empty")
        if isinstance(frame, int) and frame < 0:
            raise validation_error(f"Frame index cannot be negative, got {frame}")

        def _switched(session: AutomationSession) -> bool:
            session.switch_to_frame(frame)
            return True

        return self._run(
            lambda: self._wait(_switched, timeout, f"frame {frame!r} to be available"),
            channel,
            "Switch to frame",
            name or str(frame),
        )

    def switch_to_parent_frame(self, channel: FailureChannel = HARD):
        return self._run(self.session.switch_to_parent_frame, channel, "Switch to parent frame", "Frame")

    def switch_to_default_content(self, channel: FailureChannel = HARD):
        return self._run(self.session.switch_to_default_content, channel, "Switch to default content", "Frame")

    # =========================================================================
    # Windows
    # =========================================================================

    def switch_to_window(
        self,
        index_or_handle: Union[int, str],
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """
        Wait for a window (by 0-based position or handle) and switch to it.

        Returns:
            The handle of the window switched to
        """
        if isinstance(index_or_handle, int):
            if index_or_handle < 0:
                raise validation_error(f"Window index cannot be negative, got {index_or_handle}")
        else:
            require_text(index_or_handle, "Window handle")

        def _switch() -> str:
            handle = self._wait(window_available(index_or_handle), timeout, f"window {index_or_handle!r}")
            self.session.switch_to_window(handle)
            return handle

        return self._run(_switch, channel, "Switch to window", str(index_or_handle), soft_failure_value=None)

    # =========================================================================
    # Alerts
    # =========================================================================

    def accept_alert(self, channel: FailureChannel = HARD, timeout: Optional[float] = None):
        def _accept() -> None:
            self._wait(alert_present(), timeout, "alert to be present")
            self.session.accept_alert()

        return self._run(_accept, channel, "Accept alert", "Alert")

    def dismiss_alert(self, channel: FailureChannel = HARD, timeout: Optional[float] = None):
        def _dismiss() -> None:
            self._wait(alert_present(), timeout, "alert to be present")
            self.session.dismiss_alert()

        return self._run(_dismiss, channel, "Dismiss alert", "Alert")

    def get_alert_text(self, channel: FailureChannel = HARD, timeout: Optional[float] = None) -> Optional[str]:
        def _text() -> str:
            self._wait(alert_present(), timeout, "alert to be present")
            return self.session.alert_text()

        return self._run(_text, channel, "Get alert text", "Alert", soft_failure_value=None)

    def send_alert_text(
        self,
        text: str,
        use_external_source: bool = False,
        test_case: Optional[str] = None,
        channel: FailureChannel = HARD,
        timeout: Optional[float] = None,
    ):
        """Type into a prompt dialog; the prompt still has to be accepted."""
        require_text(text, "Alert text")
        value = self._resolve(text, use_external_source, test_case, "alert text")

        def _send() -> None:
            self._wait(alert_present(), timeout, "alert to be present")
            self.session.send_alert_text(value)

        return self._run(_send, channel, f"Send text {masked(value)} to alert", "Alert")

    # =========================================================================
    # Script and keyboard
    # =========================================================================

    def execute_script(self, script: str, *args: Any, channel: FailureChannel = HARD) -> Any:
        """
        Run JavaScript in the current frame.

        Args:
            script: Script body; use ``return`` to produce a value and
                ``arguments[i]`` to read ``args``
            *args: Script arguments (element handles allowed)
            channel: Failure channel

        Returns:
            The script's return value; None for a Soft failure
        """
        require_text(script, "Script")
        logger.debug(f"Executing script with {len(args)} arguments")
        return self._run(
            lambda: self.session.execute_script(script, *args),
            channel,
            "Execute JavaScript",
            "Page",
            soft_failure_value=None,
        )

    def scroll_to_top(self, channel: FailureChannel = HARD):
        return self._run(
            lambda: self.session.execute_script("window.scrollTo(0, 0);"),
            channel,
            "Scroll to top of page",
            "Page",
        )

    def scroll_to_bottom(self, channel: FailureChannel = HARD):
        return self._run(
            lambda: self.session.execute_script("window.scrollTo(0, document.body.scrollHeight);"),
            channel,
            "Scroll to bottom of page",
            "Page",
        )

    def press_key(self, key: str, channel: FailureChannel = HARD):
        require_text(key, "Key")
        return self._run(lambda: self.session.press_key(key), channel, f"Press key {key}", "Page")


__all__ = [
    "BrowserActions",
]
