"""
Central logging configuration for Pagewise.

Console output always; optional rotating file output written from a
background queue listener so request handlers never block on disk I/O.
"""

import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .context import TransactionIdFilter
from .formatter import build_formatter

APP_LOGGER_NAME = "pagewise_backend"

# Third-party loggers and the level they are capped at.
EXTERNAL_LOGGERS = {
    "sqlalchemy": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "asyncmy": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class LoggingConfig:
    """Owns the handlers installed on the application logger."""

    def __init__(self):
        self._listener: QueueListener | None = None
        self._handlers: list[logging.Handler] = []
        self._is_configured = False

    @property
    def is_configured(self) -> bool:
        return self._is_configured

    def setup(
        self,
        log_to_file: bool = False,
        log_level: str = "INFO",
        log_file_path: str = "logs/app.log",
        use_json_format: bool = True,
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.Logger:
        """
        Set up logging for the application logger.

        Args:
            log_to_file: Whether to also write to a rotating file
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_file_path: Path to the log file
            use_json_format: Whether to use JSON formatting
            max_bytes: Maximum file size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured application logger
        """
        if self._is_configured:
            return get_logger()

        level = getattr(logging, log_level.upper())
        formatter = build_formatter(use_json_format)
        txn_filter = TransactionIdFilter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        sinks: list[logging.Handler] = [console_handler]

        if log_to_file:
            log_dir = os.path.dirname(log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file_path, maxBytes=max_bytes, backupCount=backup_count
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            sinks.append(file_handler)

            log_queue: queue.Queue = queue.Queue()
            entry_handler: logging.Handler = QueueHandler(log_queue)
            self._listener = QueueListener(
                log_queue, *sinks, respect_handler_level=True
            )
            self._listener.start()
        else:
            entry_handler = console_handler

        # The filter runs on the calling thread, where the context var is set.
        entry_handler.addFilter(txn_filter)
        entry_handler.setLevel(level)

        app_logger = get_logger()
        app_logger.handlers.clear()
        app_logger.addHandler(entry_handler)
        app_logger.setLevel(level)
        app_logger.propagate = False
        self._handlers = [entry_handler]

        for name, ext_level in EXTERNAL_LOGGERS.items():
            ext_logger = logging.getLogger(name)
            ext_logger.handlers.clear()
            ext_logger.addHandler(entry_handler)
            ext_logger.setLevel(ext_level)
            ext_logger.propagate = False

        self._is_configured = True
        return app_logger

    def shutdown(self) -> None:
        """Stop the queue listener and detach installed handlers."""
        if self._listener:
            self._listener.stop()
            for sink in self._listener.handlers:
                sink.close()
            self._listener = None

        for handler in self._handlers:
            for name in (APP_LOGGER_NAME, *EXTERNAL_LOGGERS):
                target = logging.getLogger(name)
                target.removeHandler(handler)
                target.propagate = True
            handler.close()

        self._handlers = []
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging(
    log_to_file: bool = False,
    log_level: str = "INFO",
    log_file_path: str = "logs/app.log",
    log_format: str = "json",
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure application logging once; later calls return the same logger."""
    return _logging_config.setup(
        log_to_file=log_to_file,
        log_level=log_level,
        log_file_path=log_file_path,
        use_json_format=log_format.lower() == "json",
        max_bytes=max_bytes,
        backup_count=backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name (will be prefixed with app name)

    Returns:
        Logger instance
    """
    if name:
        if name.startswith(f"{APP_LOGGER_NAME}."):
            return logging.getLogger(name)
        return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
    return logging.getLogger(APP_LOGGER_NAME)


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
