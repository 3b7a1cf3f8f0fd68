"""Tests for logging setup."""

import json
import logging

import pytest

from secure_payments.logging_config import JsonFormatter, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_installs_one_handler() -> None:
    setup_logging("debug")
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("werkzeug").level == logging.WARNING


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_json_format() -> None:
    setup_logging("INFO", "json")
    assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)


def test_json_formatter_output() -> None:
    record = logging.LogRecord("secure_payments.payments", logging.INFO, __file__, 1,
                               "Payment %s created", (7,), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["message"] == "Payment 7 created"
    assert data["level"] == "INFO"
    assert data["logger"] == "secure_payments.payments"


def test_json_formatter_adds_request_line(app) -> None:
    record = logging.LogRecord("secure_payments.routes.auth", logging.WARNING, __file__, 1,
                               "Failed customer login", (), None)
    with app.test_request_context("/api/auth/login", method="POST"):
        data = json.loads(JsonFormatter().format(record))
    assert data["request"] == "POST /api/auth/login"
    assert "request" not in json.loads(JsonFormatter().format(record))
