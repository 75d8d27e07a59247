"""Tests for structured log output."""

import json
import logging

from daily_briefing.core.logging import (
    CorrelationIdFilter,
    StructuredLogFormatter,
    get_logger,
    set_correlation_id,
)


def make_record(msg="hello", **extra):
    record = logging.LogRecord("daily_briefing.test", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_with_extra_fields():
    record = make_record("Weather fetched", provider="openweathermap", status_code=200)

    entry = json.loads(StructuredLogFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["message"] == "Weather fetched"
    assert entry["logger"] == "daily_briefing.test"
    assert entry["provider"] == "openweathermap"
    assert entry["status_code"] == 200
    assert "args" not in entry


def test_correlation_id_is_attached():
    set_correlation_id("req-42")
    record = make_record()
    CorrelationIdFilter().filter(record)

    entry = json.loads(StructuredLogFormatter().format(record))

    assert entry["correlation_id"] == "req-42"


def test_generates_correlation_id():
    assert set_correlation_id()


def test_get_logger_returns_plain_named_logger():
    logger = get_logger("daily_briefing.adapters.implementations.news")

    assert logger is logging.getLogger("daily_briefing.adapters.implementations.news")
    assert logger.filters == []
