"""Unit tests for the structured logging helpers in ``observability``."""

from __future__ import annotations

import io
import logging

import pytest

from config_server import bind_trace_id, configure_logging, get_logger
from config_server.observability import (
    LOG_LEVEL_ENV,
    TRACE_ID,
    ContextFormatter,
    log_info,
    make_event,
    resolve_level,
)


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = get_logger()
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    bind_trace_id(None)


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="config_server")
    bind_trace_id("trace-123")
    log_info("config_loaded", layer="resolver", path="/srv/config.json")
    record = caplog.records[-1]
    assert record.getMessage() == "config_loaded"
    assert getattr(record, "context") == {"trace_id": "trace-123", "layer": "resolver", "path": "/srv/config.json"}


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("http", "/health", {"status": 200}) == {"layer": "http", "path": "/health", "status": 200}
    assert make_event("resolver", None) == {"layer": "resolver", "path": None}


def test_context_formatter_renders_key_value_pairs() -> None:
    formatter = ContextFormatter("%(message)s")
    record = logging.LogRecord("config_server", logging.INFO, __file__, 1, "config_loaded", None, None)
    record.context = {"trace_id": None, "layer": "resolver", "path": "/srv/config.json"}
    assert formatter.format(record) == "config_loaded layer=resolver path=/srv/config.json"


def test_context_formatter_leaves_plain_records_alone() -> None:
    formatter = ContextFormatter("%(message)s")
    record = logging.LogRecord("uvicorn.error", logging.INFO, __file__, 1, "Started server", None, None)
    assert formatter.format(record) == "Started server"


def test_configure_logging_writes_to_stream() -> None:
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)
    log_info("server_listening", layer="http", path=None, address="0.0.0.0:8080")
    assert "server_listening layer=http address=0.0.0.0:8080" in stream.getvalue()


def test_configure_logging_is_idempotent() -> None:
    configure_logging("INFO", stream=io.StringIO())
    configure_logging("INFO", stream=io.StringIO())
    installed = [h for h in get_logger().handlers if getattr(h, "_config_server_handler", False)]
    assert len(installed) == 1


def test_configure_logging_reads_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    configure_logging(stream=io.StringIO())
    assert get_logger().level == logging.WARNING


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), ("ERROR", logging.ERROR), (" info ", logging.INFO), ("bogus", logging.INFO), (None, logging.DEBUG)],
)
def test_resolve_level(name, expected) -> None:
    assert resolve_level(name) == expected
