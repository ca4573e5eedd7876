"""Logging infrastructure for Pagewise backend."""

from .context import (
    TransactionIdFilter,
    generate_transaction_id,
    get_transaction_id,
    set_transaction_id,
)
from .formatter import StructuredFormatter
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import AccessLogMiddleware, RequestIdMiddleware

__all__ = [
    "StructuredFormatter",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "AccessLogMiddleware",
    "RequestIdMiddleware",
    "TransactionIdFilter",
    "generate_transaction_id",
    "get_transaction_id",
    "set_transaction_id",
]
