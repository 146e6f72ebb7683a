"""Tests for structlog setup and request-scoped log context."""

import json
import logging

import pytest
import structlog

from pricing.logging import get_logger, request_context, setup_logging


@pytest.fixture
def restore_logging():
    """Undo setup_logging so later tests see default structlog and stdlib state."""
    root = logging.getLogger()
    level = root.level
    access_level = logging.getLogger("uvicorn.access").level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(access_level)
    structlog.reset_defaults()


def root_renderer() -> structlog.types.Processor:
    (handler,) = logging.getLogger().handlers
    formatter = handler.formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    return formatter.processors[-1]


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    def test_json_format(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("LOG_FORMAT", "json")

        setup_logging("DEBUG")
        get_logger("pricing.tests").info("price_served", ticker="AAPL")

        assert isinstance(root_renderer(), structlog.processors.JSONRenderer)
        assert logging.getLogger().level == logging.DEBUG
        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "price_served"
        assert event["ticker"] == "AAPL"
        assert event["level"] == "info"
        assert event["logger"] == "pricing.tests"
        assert "timestamp" in event

    def test_console_is_default(self, monkeypatch) -> None:
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        setup_logging()

        assert isinstance(root_renderer(), structlog.dev.ConsoleRenderer)
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_falls_back_to_info(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "console")

        setup_logging("chatty")

        assert logging.getLogger().level == logging.INFO

    def test_uvicorn_access_log_quieted(self) -> None:
        setup_logging("DEBUG")

        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_stdlib_records_share_the_handler(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("LOG_FORMAT", "json")

        setup_logging("INFO")
        logging.getLogger("aiosqlite").warning("slow query")

        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["event"] == "slow query"
        assert event["logger"] == "aiosqlite"


class TestRequestContext:
    def test_binds_and_clears_request_fields(self) -> None:
        with request_context("GET", "/api/v1/price/AAPL"):
            bound = structlog.contextvars.get_contextvars()

        assert bound == {"http_method": "GET", "http_path": "/api/v1/price/AAPL"}
        assert "http_method" not in structlog.contextvars.get_contextvars()
