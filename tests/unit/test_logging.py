import json
import logging

import pytest

from shared.infrastructure.logging import (
    CustomJsonFormatter,
    get_context_logger,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _format(record_fields):
    formatter = CustomJsonFormatter("%(name)s %(levelname)s %(message)s", service="sumologic-service")
    record = logging.makeLogRecord({"name": "test", "levelname": "INFO", **record_fields})
    return json.loads(formatter.format(record))


def test_formatter_adds_service_and_event_identifiers():
    line = _format({"msg": "gotEvent", "keptn_context": "ctx-123", "event_id": "evt-1"})

    assert line["message"] == "gotEvent"
    assert line["service"] == "sumologic-service"
    assert line["keptn_context"] == "ctx-123"
    assert line["event_id"] == "evt-1"
    assert "timestamp" in line


def test_formatter_redacts_credentials():
    line = _format({"msg": "client created", "access_key": "s3cr3t", "access_id": "id-1"})

    assert line["access_key"] == "***REDACTED***"
    assert line["access_id"] == "id-1"


def test_invalid_log_level_falls_back_to_info(restore_root_logger):
    setup_logging("LOUD", "sumologic-service")
    assert restore_root_logger.level == logging.INFO


def test_log_level_is_case_insensitive(restore_root_logger):
    setup_logging("debug", "sumologic-service")
    assert restore_root_logger.level == logging.DEBUG


def test_context_logger_merges_call_extra():
    log = get_context_logger("test", keptn_context="ctx-123", event_id="evt-1")
    _, kwargs = log.process("msg", {"extra": {"indicator": "throughput"}})

    assert kwargs["extra"] == {
        "keptn_context": "ctx-123",
        "event_id": "evt-1",
        "indicator": "throughput",
    }


def test_context_logger_without_identifiers_is_plain_logger():
    assert isinstance(get_context_logger("test"), logging.Logger)
