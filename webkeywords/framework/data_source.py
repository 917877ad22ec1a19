"""
================================================================================
External Test Data
================================================================================

Tabular lookup of input values by test case name and field key, so keyword
arguments can be either literals or keys into a data file.

Data file layout (YAML):

    login_valid:
      username: demo_user
      password: demo_password
    login_locked:
      username: locked_user

Test case names and keys match case-insensitively.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import yaml
from loguru import logger

from .config_loader import ConfigLoader
from .exceptions import validation_error


class ExternalDataSource(Protocol):
    """Lookup of a single value for a test case."""

    def lookup(self, test_case: str, key: str) -> Optional[str]: ...


class YamlDataSource:
    """
    ExternalDataSource backed by a YAML file.

    Usage:
        source = YamlDataSource("testdata/data.yaml")
        source.lookup("login_valid", "username")
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Dict[str, Dict[str, str]] = {}
        self._load()

    @classmethod
    def from_config(cls, config: ConfigLoader) -> Optional["YamlDataSource"]:
        """Source named by ``data.file``, or None when not configured."""
        path = config.get("data.file")
        if not path:
            return None
        return cls(path)

    def _load(self) -> None:
        if not self.path.exists():
            logger.warning(f"Test data file not found: {self.path}. No external data available.")
            self._data = {}
            return

        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise validation_error(f"Test data file must contain a mapping of test cases: {self.path}")

        self._data = {
            str(case).strip().lower(): _normalize_row(row)
            for case, row in raw.items()
            if isinstance(row, dict)
        }
        logger.debug(f"Loaded test data for {len(self._data)} test cases from {self.path}")

    def lookup(self, test_case: str, key: str) -> Optional[str]:
        row = self._data.get(str(test_case).strip().lower())
        if row is None:
            return None
        return row.get(str(key).strip().lower())

    def reload(self) -> None:
        self._load()


def _normalize_row(row: Dict[Any, Any]) -> Dict[str, str]:
    return {
        str(k).strip().lower(): "" if v is None else str(v).strip()
        for k, v in row.items()
    }


def resolve_value(
    value_or_key: str,
    use_external_source: bool = False,
    test_case: Optional[str] = None,
    source: Optional[ExternalDataSource] = None,
    field_name: str = "value",
) -> str:
    """
    Resolve a keyword argument that is either a literal or a data key.

    With ``use_external_source`` false the input is returned unchanged.
    Otherwise it is looked up for ``test_case``; a missing or empty entry
    yields "" and a warning.

    Raises:
        FrameworkError: kind VALIDATION when the external source is requested
            without a source or test case name
    """
    if not use_external_source:
        return value_or_key

    if source is None:
        raise validation_error("External data requested but no data source is configured")
    if not test_case or not str(test_case).strip():
        raise validation_error("Test case name is required when using external data")

    value = source.lookup(test_case, value_or_key)
    if value is None or not value.strip():
        # TODO: make missing keys an error once existing suites stop relying on "" for optional fields
        logger.warning(
            f"No external data found for test case [{test_case}], key [{value_or_key}]. Using empty string."
        )
        return ""

    logger.info(f"Using external data for {field_name} [{value_or_key}]")
    return value


__all__ = [
    "ExternalDataSource",
    "YamlDataSource",
    "resolve_value",
]
