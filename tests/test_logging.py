"""Tests for structured logging setup."""

import json
import logging
import sys

from pagewise_backend.core.logging import (
    StructuredFormatter,
    TransactionIdFilter,
    get_logger,
    get_transaction_id,
    set_transaction_id,
    setup_logging,
    shutdown_logging,
)


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord(
        name="pagewise_backend.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_observability_fields():
    set_transaction_id("txn00001")

    payload = json.loads(StructuredFormatter().format(_record(page_index=3)))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger_name"] == "pagewise_backend.test"
    assert payload["transaction_id"] == "txn00001"
    assert payload["page_index"] == 3
    assert payload["service"]["name"] == "pagewise-backend"
    assert "msg" not in payload
    assert "pathname" not in payload


def test_formatter_includes_exception_details():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("failed", exc_info=sys.exc_info())

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["exception"]["type"] == "RuntimeError"
    assert payload["exception"]["message"] == "boom"
    assert payload["exception"]["stacktrace"]


def test_transaction_filter_stamps_records():
    set_transaction_id("feedbeef")
    record = _record()

    assert TransactionIdFilter().filter(record) is True
    assert record.transaction_id == "feedbeef"
    assert get_transaction_id() == "feedbeef"


def test_get_logger_namespaces_names():
    assert get_logger().name == "pagewise_backend"
    assert get_logger("core.pagination").name == "pagewise_backend.core.pagination"
    assert get_logger("pagewise_backend.modules.items").name == (
        "pagewise_backend.modules.items"
    )


def test_file_logging_writes_json_lines(tmp_path):
    log_file = tmp_path / "logs" / "app.log"

    setup_logging(log_to_file=True, log_level="INFO", log_file_path=str(log_file))
    try:
        get_logger("test").info("written to file", extra={"page_index": 7})
    finally:
        shutdown_logging()

    lines = log_file.read_text().strip().splitlines()
    payload = json.loads(lines[-1])
    assert payload["message"] == "written to file"
    assert payload["page_index"] == 7
    assert get_logger().propagate is True


def test_plain_format_console_logging(capsys):
    setup_logging(log_to_file=False, log_level="INFO", log_format="text")
    try:
        get_logger("test").info("plain line")
    finally:
        shutdown_logging()

    out = capsys.readouterr().out
    assert "plain line" in out
    assert " | INFO | " in out
