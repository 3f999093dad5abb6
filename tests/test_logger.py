"""Unit tests for the JSON log formatter."""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import logging
from logger import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord(
        name="services.orchestrator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="merge completed in %sms",
        args=(12,),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_is_json():
    payload = json.loads(JSONFormatter().format(make_record()))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "services.orchestrator"
    assert payload["message"] == "merge completed in 12ms"
    assert payload["timestamp"].endswith("Z")


def test_known_extras_included():
    record = make_record(operation="merge", duration_ms=12, unrelated="x")

    payload = json.loads(JSONFormatter().format(record))

    assert payload["operation"] == "merge"
    assert payload["duration_ms"] == 12
    assert "unrelated" not in payload


def test_exception_included():
    try:
        raise ValueError("bad pdf")
    except ValueError:
        record = make_record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JSONFormatter().format(record))

    assert "ValueError: bad pdf" in payload["exception"]


def test_setup_logging_installs_single_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging("DEBUG")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
