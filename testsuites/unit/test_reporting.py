import pytest
from loguru import logger

from webkeywords import common
from webkeywords.common import ensure_directory, init_logger, mask, reset_logger
from webkeywords.framework import reporting
from webkeywords.framework.reporting import (
    EVENT_FAILURE,
    EVENT_START,
    EVENT_SUCCESS,
    ActionReporter,
)


@pytest.fixture
def fresh_logger():
    reset_logger()
    yield
    reset_logger()
    init_logger()


@pytest.mark.parametrize(
    "value, expected",
    [
        ("secret-password", "se****"),
        ("a", "a****"),
        (1234, "12****"),
        (None, None),
    ],
)
def test_mask(value, expected):
    assert mask(value) == expected


def test_reporter_records_events_in_order():
    reporter = ActionReporter(attach_failures=False)

    reporter.start("Clicking element", "Submit")
    reporter.success("Clicked element", "Submit")
    reporter.failure("Clicking element", "Cancel", "not found")

    assert [e.event for e in reporter.events] == [EVENT_START, EVENT_SUCCESS, EVENT_FAILURE]
    assert reporter.events[2].reason == "not found"
    assert reporter.events[2].target == "Cancel"

    reporter.clear()
    assert reporter.events == []


def test_reporter_without_recording():
    reporter = ActionReporter(record=False, attach_failures=False)

    reporter.start("Clicking element", "Submit")

    assert reporter.events == []


def test_failure_is_attached_to_report(monkeypatch):
    attached = []
    monkeypatch.setattr(reporting, "attach_text", lambda text, name: attached.append((name, text)))

    ActionReporter().failure("Verify title", "page", "expected 'Home' but found 'Login'")

    assert attached == [("Failure: Verify title", "expected 'Home' but found 'Login'")]


def test_events_carry_structured_extras():
    records = []
    handler_id = logger.add(lambda m: records.append(m.record["extra"]), level="INFO")
    try:
        ActionReporter(attach_failures=False).success("Clicked element", "Submit")
    finally:
        logger.remove(handler_id)

    assert {"event": EVENT_SUCCESS, "description": "Clicked element", "target": "Submit"}.items() <= records[-1].items()


def test_init_logger_writes_log_file(tmp_path, fresh_logger):
    log_file = tmp_path / "logs" / "keywords.log"

    init_logger(level="debug", log_file=str(log_file))
    logger.debug("hello from keywords")
    init_logger(level="error")

    assert common._logger_initialized
    assert "hello from keywords" in log_file.read_text(encoding="utf-8")


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"

    assert ensure_directory(str(target)) == str(target)
    assert target.is_dir()
