"""Tests for wren.logs -- level names, handler setup, and JSON lines."""

import io
import json
import logging
import sys

import pytest

from wren.logs import JSONFormatter, configure_logging, resolve_level


@pytest.fixture
def wren_logger():
    logger = logging.getLogger("wren")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestResolveLevel:
    @pytest.mark.parametrize(
        ("name", "level"),
        [("error", logging.ERROR), ("WARN", logging.WARNING), ("info", logging.INFO), ("debug", logging.DEBUG)],
    )
    def test_names(self, name: str, level: int) -> None:
        assert resolve_level(name) == level

    def test_numeric_passthrough(self) -> None:
        assert resolve_level(15) == 15

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("loud")


class TestConfigureLogging:
    def test_text_format(self, wren_logger) -> None:
        stream = io.StringIO()
        configure_logging("info", stream=stream)
        logging.getLogger("wren.discovery").info("Loaded route: %s", "GET /x")
        assert "[INFO] wren.discovery: Loaded route: GET /x" in stream.getvalue()

    def test_level_filters(self, wren_logger) -> None:
        stream = io.StringIO()
        configure_logging("warn", stream=stream)
        logging.getLogger("wren.pipeline").info("hidden")
        assert stream.getvalue() == ""

    def test_reconfigure_replaces_handler(self, wren_logger) -> None:
        configure_logging("info", stream=io.StringIO())
        configure_logging("info", stream=io.StringIO())
        marked = [h for h in wren_logger.handlers if getattr(h, "_wren_handler", False)]
        assert len(marked) == 1

    def test_json_format(self, wren_logger) -> None:
        stream = io.StringIO()
        configure_logging("info", "json", stream=stream)
        logging.getLogger("wren.pipeline").info("GET /x - %dms - %d", 3, 200, extra={"route": "/x"})
        record = json.loads(stream.getvalue().strip())
        assert record["level"] == "info"
        assert record["logger"] == "wren.pipeline"
        assert record["message"] == "GET /x - 3ms - 200"
        assert record["route"] == "/x"
        assert "timestamp" in record


class TestJSONFormatter:
    def test_exception_info(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("wren").makeRecord(
                "wren", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]
