"""Tests for structured logging and request-id helpers."""

from __future__ import annotations

import json
import logging
import time

from starlette.requests import Request

from api.observability import (
    JsonFormatter,
    access_log_fields,
    get_request_id,
    new_request_id,
    reset_request_id,
    set_request_id,
)


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fittrack.test", level=logging.INFO, pathname="test.py",
        lineno=1, msg=msg, args=args, exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_outputs_valid_json():
    parsed = json.loads(JsonFormatter().format(_record("hello %s", "world")))
    assert parsed["message"] == "hello world"
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "fittrack.test"
    assert "ts" in parsed


def test_json_formatter_copies_extra_fields():
    parsed = json.loads(JsonFormatter().format(_record("workout_created", workout_id=7, user_id=3)))
    assert parsed["workout_id"] == 7
    assert parsed["user_id"] == 3


def test_json_formatter_includes_request_id():
    token = set_request_id("req-abc")
    try:
        parsed = json.loads(JsonFormatter().format(_record("x")))
    finally:
        reset_request_id(token)
    assert parsed["request_id"] == "req-abc"
    assert get_request_id() is None


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        record = logging.LogRecord(
            name="t", level=logging.ERROR, pathname="t.py", lineno=1,
            msg="failed", args=(), exc_info=sys.exc_info(),
        )
    parsed = json.loads(JsonFormatter().format(record))
    assert "ValueError: boom" in parsed["exc_info"]


def test_new_request_id_is_unique_hex():
    a, b = new_request_id(), new_request_id()
    assert a != b
    int(a, 16)


def _request(client=("10.0.0.5", 5123)) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/api/v1/health",
            "query_string": b"",
            "headers": [],
            "client": client,
        }
    )


def test_access_log_fields():
    fields = access_log_fields(_request(), 200, time.perf_counter())
    assert fields["method"] == "GET"
    assert fields["path"] == "/api/v1/health"
    assert fields["status_code"] == 200
    assert fields["client_ip"] == "10.0.0.5"
    assert fields["duration_ms"] >= 0


def test_access_log_fields_without_client():
    assert access_log_fields(_request(client=None), 500, time.perf_counter())["client_ip"] == ""
