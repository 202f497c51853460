"""Tests for structured JSON logging."""

import json
import logging

from pulse_analytics import LogEvent, ServerRejectedError, create_logger


def records_for(caplog, name):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == name]


def test_info_entry_shape(caplog):
    logger = create_logger("test.shape")
    with caplog.at_level(logging.INFO, logger=logger.logger_name):
        logger.info(
            event=LogEvent.EVENT_SENT,
            message="Event sent successfully",
            metadata={"event_type": "open_app"},
        )

    [entry] = records_for(caplog, "pulse_analytics.test.shape")
    assert entry["level"] == "INFO"
    assert entry["component"] == "test.shape"
    assert entry["event"] == "event.sent"
    assert entry["metadata"] == {"event_type": "open_app"}
    assert "timestamp" in entry
    assert "exception" not in entry


def test_exception_summary(caplog):
    logger = create_logger("test.exc")
    with caplog.at_level(logging.WARNING, logger=logger.logger_name):
        logger.warning(
            event=LogEvent.SERVER_REJECTED_ERROR,
            message="Delivery failed",
            exc_info=ServerRejectedError(500),
        )

    [entry] = records_for(caplog, "pulse_analytics.test.exc")
    assert entry["exception"] == {
        "type": "ServerRejectedError",
        "message": "Server rejected event (HTTP 500)",
    }


def test_level_filtering(caplog):
    logger = create_logger("test.level", level=logging.WARNING)
    with caplog.at_level(logging.DEBUG):
        logger.info(event=LogEvent.EVENT_SENT, message="hidden")
        logger.debug(event=LogEvent.EVENT_COMPOSED, message="hidden")
    assert records_for(caplog, "pulse_analytics.test.level") == []


def test_unserializable_metadata_is_stringified(caplog):
    logger = create_logger("test.meta")
    with caplog.at_level(logging.INFO, logger=logger.logger_name):
        logger.info(event=LogEvent.EVENT_SENT, message="x", metadata={"obj": object()})

    [entry] = records_for(caplog, "pulse_analytics.test.meta")
    assert entry["metadata"]["obj"].startswith("<object object")
