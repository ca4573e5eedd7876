"""
Structured JSON log formatting.
Every record is emitted as one JSON object with observability fields attached.
"""

import logging
import traceback
from datetime import datetime
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from .context import get_transaction_id

SERVICE_NAME = "pagewise-backend"
SERVICE_VERSION = "0.1.0"

DEFAULT_FORMAT = "%(timestamp)s %(level)s %(transaction_id)s %(message)s"
PLAIN_FORMAT = (
    "%(asctime)s | %(levelname)s | %(transaction_id)s | "
    "%(filename)s:%(lineno)d | %(message)s"
)

_DROPPED_FIELDS = ("msg", "args", "created", "msecs", "relativeCreated", "pathname")


class StructuredFormatter(JsonFormatter):
    """JSON formatter adding timestamp, location, transaction and service fields."""

    def __init__(self, fmt: str = DEFAULT_FORMAT, **kwargs: Any):
        kwargs.setdefault("datefmt", "%Y-%m-%dT%H:%M:%S")
        super().__init__(fmt, **kwargs)

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now().astimezone().isoformat()
        log_record["transaction_id"] = getattr(
            record, "transaction_id", None
        ) or get_transaction_id()
        log_record["level"] = record.levelname
        log_record["logger_name"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["service"] = {"name": SERVICE_NAME, "version": SERVICE_VERSION}

        if record.exc_info and record.exc_info[0] is not None:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        for field in _DROPPED_FIELDS:
            log_record.pop(field, None)


def build_formatter(use_json_format: bool) -> logging.Formatter:
    """Return the JSON formatter, or a plain pipe-separated one."""
    if use_json_format:
        return StructuredFormatter()
    return logging.Formatter(PLAIN_FORMAT)
