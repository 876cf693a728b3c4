"""Tests for structured logging setup."""

import json
import logging
import sys

import pytest

from risk_overlay.logging import (
    PACKAGE_LOGGER,
    ContextTextFormatter,
    JSONFormatter,
    record_context,
    resolve_level,
    setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="risk_overlay.engine",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="Rules fired: %s",
        args=(["opioid_gabaergic"],),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = logger.handlers[:], logger.level
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


def test_record_context_strips_prefix():
    record = _record(risk_rules=["opioid_gabaergic"], risk_record_index=3, other="x")
    assert record_context(record) == {"rules": ["opioid_gabaergic"], "record_index": 3}


class TestJSONFormatter:
    def test_single_line_json_with_context(self):
        line = JSONFormatter().format(_record(risk_rules=["opioid_gabaergic"], other="x"))
        assert "\n" not in line
        payload = json.loads(line)
        assert payload["level"] == "DEBUG"
        assert payload["logger"] == "risk_overlay.engine"
        assert payload["message"] == "Rules fired: ['opioid_gabaergic']"
        assert payload["context"] == {"rules": ["opioid_gabaergic"]}

    def test_no_context_key_without_extras(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert "context" not in payload

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert payload["error"] == "ValueError: boom"
        assert "Traceback" in payload["traceback"]


class TestContextTextFormatter:
    def test_appends_sorted_pairs(self):
        line = ContextTextFormatter().format(_record(risk_rules=["x"], risk_entry_count=2))
        assert line.endswith("Rules fired: ['opioid_gabaergic'] [entry_count=2 rules=['x']]")

    def test_plain_without_context(self):
        line = ContextTextFormatter().format(_record())
        assert line.endswith("Rules fired: ['opioid_gabaergic']")


def test_setup_logging_replaces_handlers(package_logger):
    setup_logging("json", logging.INFO)
    setup_logging("json", logging.INFO)
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)

    setup_logging("text")
    assert isinstance(package_logger.handlers[0].formatter, ContextTextFormatter)
    assert package_logger.level == logging.WARNING


def test_setup_logging_leaves_root_alone(package_logger):
    root = logging.getLogger()
    before = root.handlers[:]
    setup_logging("text", "DEBUG")
    assert root.handlers == before
    assert package_logger.level == logging.DEBUG


def test_resolve_level():
    assert resolve_level(logging.DEBUG) == logging.DEBUG
    assert resolve_level("info") == logging.INFO
    assert resolve_level("nonsense") == logging.WARNING
