"""Logger setup tests."""

import io
import json

import pytest
import structlog

from paddle_sdk.logger import new_logger


def test_new_logger_json_format() -> None:
    """JSON output carries the event, level, logger name and context."""
    stream = io.StringIO()
    logger = new_logger(level="INFO", format="json", stream=stream)
    logger.info("page fetched", items=2)
    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record["event"] == "page fetched"
    assert record["items"] == 2
    assert record["level"] == "info"
    assert record["logger"] == "paddle_sdk"
    assert "timestamp" in record


def test_new_logger_text_format() -> None:
    """Text output is rendered for the console."""
    stream = io.StringIO()
    logger = new_logger(level="DEBUG", format="text", stream=stream)
    logger.debug("page fetched", items=2)
    output = stream.getvalue()
    assert "page fetched" in output
    assert "items=2" in output


def test_new_logger_filters_by_level() -> None:
    """Records below the configured level are dropped."""
    stream = io.StringIO()
    logger = new_logger(level="WARNING", stream=stream)
    logger.debug("hidden")
    logger.warning("shown")
    assert "hidden" not in stream.getvalue()
    assert "shown" in stream.getvalue()


def test_new_logger_reconfigures_existing_loggers() -> None:
    """A module logger that already logged follows a later reconfiguration."""
    module_logger = structlog.stdlib.get_logger("paddle_sdk.transport")
    first = io.StringIO()
    new_logger(format="json", stream=first)
    module_logger.warning("first")
    second = io.StringIO()
    new_logger(format="text", stream=second)
    module_logger.warning("second")
    assert json.loads(first.getvalue().splitlines()[-1])["event"] == "first"
    assert "second" in second.getvalue()
    assert "second" not in first.getvalue()


def test_new_logger_binds_context() -> None:
    """Bound values appear on every record."""
    stream = io.StringIO()
    logger = new_logger(stream=stream).bind(request_id="req-1")
    logger.info("bound")
    assert json.loads(stream.getvalue().splitlines()[-1])["request_id"] == "req-1"


def test_new_logger_unknown_format() -> None:
    """An unknown format is rejected."""
    with pytest.raises(ValueError):
        new_logger(format="xml")
