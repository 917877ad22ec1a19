"""
Fixtures for the keyword core unit tests: fake clock, fake session,
configuration and a recording reporter.
"""

from __future__ import annotations

from typing import Any, Generator, List

import pytest
from loguru import logger

from testsuites.unit.fakes import FakeClock, FakeSession
from webkeywords.framework import wait_helpers
from webkeywords.framework.config_loader import ConfigLoader
from webkeywords.framework.reporting import ActionReporter


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """Fake monotonic clock; sleeping advances it instantly."""
    fake = FakeClock()
    monkeypatch.setattr(wait_helpers, "_now", fake.monotonic)
    monkeypatch.setattr(wait_helpers, "_sleep", fake.sleep)
    return fake


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def config(tmp_path) -> ConfigLoader:
    """Configuration with no file on disk, only the defaults."""
    return ConfigLoader(config_path=tmp_path / "absent.yaml")


@pytest.fixture
def reporter() -> ActionReporter:
    return ActionReporter(attach_failures=False)


@pytest.fixture
def log_messages() -> Generator[List[Any], None, None]:
    """Loguru records emitted during the test (WARNING and above)."""
    messages: List[Any] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)
