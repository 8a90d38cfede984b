"""Unit tests for structured JSON logging."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import logging
import pytest
from logger import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord(
        name="services.chat_session",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Delivered bot turn %s",
        args=("turn_abc",),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_basic_fields():
    """Test that the core fields are emitted as JSON."""
    data = json.loads(JSONFormatter().format(make_record()))

    assert data["level"] == "INFO"
    assert data["logger"] == "services.chat_session"
    assert data["message"] == "Delivered bot turn turn_abc"
    assert data["timestamp"].endswith("Z")
    assert "session_id" not in data


def test_format_chat_fields():
    """Test that chat fields passed through extra= are included."""
    record = make_record(session_id="sess_1", turn_id="turn_abc", sender="bot", rule_triggered="menu")
    data = json.loads(JSONFormatter().format(record))

    assert data["session_id"] == "sess_1"
    assert data["turn_id"] == "turn_abc"
    assert data["sender"] == "bot"
    assert data["rule_triggered"] == "menu"


def test_format_exception():
    """Test that exception text is included."""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    data = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in data["exception"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_installs_json_handler(restore_root_logger):
    """Test that setup_logging leaves exactly one JSON handler."""
    setup_logging("DEBUG")

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
