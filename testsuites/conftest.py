"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and provides shared fixtures.

================================================================================
"""

import pytest

from webkeywords.common import init_logger
from webkeywords.framework.config_loader import ConfigLoader


def pytest_configure(config):
    """Configure pytest with project-wide custom markers and logging."""
    init_logger(config=ConfigLoader())

    # Test type markers
    config.addinivalue_line(
        "markers", "unit: Fast tests against the fake session, no browser"
    )
    config.addinivalue_line(
        "markers", "integration: Tests driving a real browser through Playwright"
    )

    # Component markers
    config.addinivalue_line(
        "markers", "wait: Tests for the polling wait engine and element acquisition"
    )
    config.addinivalue_line(
        "markers", "retry: Tests for whole-action retry with backoff"
    )
    config.addinivalue_line(
        "markers", "keywords: Tests for domain keywords and failure channels"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Tests under testsuites/unit get the 'unit' marker automatically.
    """
    for item in items:
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "webkeywords - Keyword Automation Core",
        "=" * 60,
        "",
    ]
