"""
================================================================================
Keyword Framework Core
================================================================================

Synchronization and action-execution core shared by every keyword.

Modules:
    - config_loader: YAML configuration with environment overrides
    - exceptions: FrameworkError with an ErrorKind tag, TimeoutExceeded
    - session: Automation session protocols and error vocabulary
    - playwright_session: Session implementation on the Playwright sync API
    - wait_helpers: Polling wait engine
    - conditions: Element readiness predicates and page conditions
    - element_finder: Locator-to-element acquisition
    - retry: Whole-action retry with linear backoff
    - reporting: Start/success/failure events and Allure attachments
    - execution: Hard/Soft/Silent failure channels
    - data_source: External test data lookup

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .data_source import ExternalDataSource, YamlDataSource, resolve_value
from .element_finder import ElementFinder
from .exceptions import ErrorKind, FrameworkError, TimeoutExceeded, kind_of, validation_error
from .execution import ActionOutcome, Diagnostics, FailureChannel, execute
from .playwright_session import PlaywrightElement, PlaywrightSession
from .reporting import ActionEvent, ActionReporter
from .retry import RetryPolicy, retry, with_retry
from .session import (
    AutomationSession,
    ElementHandle,
    ElementNotInteractableError,
    NoAlertPresentError,
    NoSuchElementError,
    NoSuchFrameError,
    NoSuchWindowError,
    ScriptError,
    SessionError,
    StaleElementError,
    TRANSIENT_ERRORS,
)
from .wait_helpers import WaitSpec, pause, wait_until

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "ExternalDataSource",
    "YamlDataSource",
    "resolve_value",
    "ElementFinder",
    "ErrorKind",
    "FrameworkError",
    "TimeoutExceeded",
    "validation_error",
    "kind_of",
    "ActionOutcome",
    "Diagnostics",
    "FailureChannel",
    "execute",
    "PlaywrightElement",
    "PlaywrightSession",
    "ActionEvent",
    "ActionReporter",
    "RetryPolicy",
    "retry",
    "with_retry",
    "AutomationSession",
    "ElementHandle",
    "ElementNotInteractableError",
    "NoAlertPresentError",
    "NoSuchElementError",
    "NoSuchFrameError",
    "NoSuchWindowError",
    "ScriptError",
    "SessionError",
    "StaleElementError",
    "TRANSIENT_ERRORS",
    "WaitSpec",
    "pause",
    "wait_until",
]
