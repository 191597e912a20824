import json
import logging

from expense_report.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "expense_report.test", logging.INFO, __file__, 1, "saved %d", (3,), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_includes_request_id_and_extras():
    token = request_id_ctx.set("abc123")
    try:
        record = make_record(status=200, path="/report/save")
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx.reset(token)
    entry = json.loads(JsonFormatter().format(record))
    assert entry["message"] == "saved 3"
    assert entry["request_id"] == "abc123"
    assert entry["status"] == 200
    assert entry["path"] == "/report/save"
    assert "method" not in entry


def test_request_id_defaults_to_dash_outside_requests():
    record = make_record()
    RequestIdFilter().filter(record)
    assert json.loads(JsonFormatter().format(record))["request_id"] == "-"


def test_request_id_header_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "trace-1"})
    assert resp.headers["X-Request-ID"] == "trace-1"
    assert client.get("/health").headers["X-Request-ID"]
