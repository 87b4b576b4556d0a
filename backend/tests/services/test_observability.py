"""Structured logging — JSON line shape, context keys, handler replacement."""

import json
import logging

import pytest

from origen.infrastructure.observability import (
    ContextTextFormatter, JSONFormatter, setup_logging,
)


def _record(msg="Row added", **extra):
    record = logging.LogRecord("origen.gateway", logging.INFO, __file__, 1, msg, (), None)
    record.__dict__.update(extra)
    return record


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_line_carries_only_set_context():
    line = JSONFormatter().format(
        _record(collection="items", operation="add", username=None),
    )
    entry = json.loads(line)
    assert entry["msg"] == "Row added"
    assert entry["level"] == "INFO"
    assert entry["collection"] == "items"
    assert entry["operation"] == "add"
    assert "username" not in entry
    assert entry["ts"].endswith("+00:00")


def test_json_stringifies_non_serializable_context():
    entry = json.loads(JSONFormatter().format(_record(instance_id=object())))
    assert entry["instance_id"].startswith("<object")


def test_text_format_appends_context():
    line = ContextTextFormatter().format(_record(error_code="SCHEMA_MISSING"))
    assert line.endswith("| error_code=SCHEMA_MISSING")


def test_setup_twice_keeps_one_handler(restore_root):
    first = setup_logging("INFO", "json")
    second = setup_logging("DEBUG", "text")
    assert first not in restore_root.handlers
    assert second in restore_root.handlers
    assert isinstance(second.formatter, ContextTextFormatter)
    assert restore_root.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(restore_root):
    setup_logging("chatty")
    assert restore_root.level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
