"""Tests for structured logging."""
import json
import logging

from app.core.logging import JSONFormatter, clear_correlation_id, get_correlation_id, set_correlation_id


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_correlation_id_and_extra():
    token = set_correlation_id("req-42")
    try:
        payload = json.loads(JSONFormatter().format(_record("Ingested results", event_id="evt-1")))
    finally:
        clear_correlation_id(token)

    assert payload["message"] == "Ingested results"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "req-42"
    assert payload["extra"] == {"event_id": "evt-1"}


def test_correlation_id_resets_after_request():
    token = set_correlation_id("req-43")
    clear_correlation_id(token)

    assert get_correlation_id() == ""
