"""
================================================================================
Action Reporting
================================================================================

Structured start/success/failure events for keyword execution.

Every event goes to loguru with ``event``, ``description`` and ``target``
bound as extras, and failures are attached to the Allure report. Events are
also kept in memory so a test can look at what a keyword reported.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import allure
from loguru import logger


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_text(text: str, name: str = "Text") -> None:
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


# ================================================================================
# Action Events
# ================================================================================

EVENT_START = "start"
EVENT_SUCCESS = "success"
EVENT_FAILURE = "failure"


@dataclass
class ActionEvent:
    """One structured event emitted for a keyword."""
    event: str
    description: str
    target: str
    reason: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class ActionReporter:
    """
    Sink for keyword start/success/failure events.

    Usage:
        reporter = ActionReporter()
        reporter.start("Clicking element", "Submit button")
        reporter.success("Clicked element", "Submit button")
    """

    def __init__(self, record: bool = True, attach_failures: bool = True):
        """
        Initialize reporter.

        Args:
            record: Keep emitted events in ``events``
            attach_failures: Attach failure reasons to the Allure report
        """
        self.record = record
        self.attach_failures = attach_failures
        self.events: List[ActionEvent] = []

    def start(self, description: str, target: str) -> None:
        self._emit(ActionEvent(EVENT_START, description, target))
        logger.bind(event=EVENT_START, description=description, target=target).info(
            f"▶ {description} [{target}]"
        )

    def success(self, description: str, target: str) -> None:
        self._emit(ActionEvent(EVENT_SUCCESS, description, target))
        logger.bind(event=EVENT_SUCCESS, description=description, target=target).info(
            f"✅ {description} [{target}]"
        )

    def failure(self, description: str, target: str, reason: str) -> None:
        self._emit(ActionEvent(EVENT_FAILURE, description, target, reason=reason))
        logger.bind(event=EVENT_FAILURE, description=description, target=target).error(
            f"❌ {description} [{target}]: {reason}"
        )
        if self.attach_failures:
            attach_text(reason, name=f"Failure: {description}")

    def clear(self) -> None:
        self.events.clear()

    def _emit(self, event: ActionEvent) -> None:
        if self.record:
            self.events.append(event)


__all__ = [
    "attach_text",
    "ActionEvent",
    "ActionReporter",
    "EVENT_START",
    "EVENT_SUCCESS",
    "EVENT_FAILURE",
]
