"""
================================================================================
Keywords
================================================================================

Domain keywords built on the wait, acquisition, retry and execution core.

Usage:
    from webkeywords.keywords import Keywords
    from webkeywords.framework import FailureChannel, PlaywrightSession

    kw = Keywords(PlaywrightSession(page), config)
    kw.navigate_to("https://example.com/login")
    kw.enter_text("//input[@id='user']", "username", "Username",
                  use_external_source=True, test_case="login_valid")
    kw.click("//button[@type='submit']", "Sign in")
    if not kw.verify_element_visible("//div[@id='promo']", channel=FailureChannel.SOFT, timeout=1):
        ...

Author: Automation Team
License: MIT
================================================================================
"""

from .base import KeywordGroup
from .browser import BrowserActions
from .element_actions import ElementActions
from .verifications import Verifications
from .waits import Waits


class Keywords(ElementActions, Verifications, Waits, BrowserActions):
    """
    Every keyword group over one session, configuration, reporter and
    data source.
    """
    pass


__all__ = [
    "Keywords",
    "KeywordGroup",
    "ElementActions",
    "Verifications",
    "Waits",
    "BrowserActions",
]
