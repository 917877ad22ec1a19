"""
Repository-level pytest configuration.

Why this exists:
  - Keep local runs predictable: wait/retry overrides exported in the shell
    must not leak into tests that assert on configuration defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest


# Environment variables that override keyword core configuration
_OVERRIDE_ENV_VARS = (
    "WAIT_TIMEOUT_SECONDS",
    "WAIT_POLLING_MILLIS",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_BASE_DELAY_MILLIS",
    "DATA_FILE",
    "DATA_ENABLED",
)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch) -> Generator[None, None, None]:
    """Clear configuration overrides so every test starts from defaults."""
    for name in _OVERRIDE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
