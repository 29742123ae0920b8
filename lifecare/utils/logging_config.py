"""
Logging configuration.

Text output for local runs, JSON lines (python-json-logger) for deployments
where logs are shipped. Structured fields such as ``booking_id`` are attached
with ``LogContext`` and appear as top-level JSON keys.
"""

import logging
import logging.handlers
import sys
import threading
from contextvars import ContextVar
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

APP_NAME = "lifecare"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Third-party loggers kept at WARNING
NOISY_LOGGERS = ("httpx", "uvicorn.access", "watchfiles")


class JSONFormatter(JsonFormatter):
    """JSON formatter adding app, level, source location and context fields."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["app"] = APP_NAME
        log_record["source"] = f"{record.module}:{record.funcName}:{record.lineno}"
        log_record.update(getattr(record, "context", {}))


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return JSONFormatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: Path | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger. Existing root handlers are replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_format: "text" or "json".
        log_file: Optional path for a rotating log file.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
    """
    formatter = build_formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"Logging configured: level={level}, format={log_format}, file={log_file}")


# Open LogContext frames for the current thread or task, outermost first
_context_frames: ContextVar[tuple] = ContextVar("log_context_frames", default=())
_factory_lock = threading.Lock()
_factory_installed = False


def _install_record_factory() -> None:
    """Wrap the log record factory once so records pick up open context fields."""
    global _factory_installed
    with _factory_lock:
        if _factory_installed:
            return
        previous = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            frames = _context_frames.get()
            if frames:
                context = {}
                for frame in frames:
                    context.update(frame.fields)
                record.context = context
            return record

        logging.setLogRecordFactory(record_factory)
        _factory_installed = True


class LogContext:
    """
    Attach fields to records created inside the block.

    Fields live in a context variable, so they only reach records from the
    same thread or task. Nested contexts merge, inner values winning, and
    each context removes only its own fields on exit.

        with LogContext(logger, booking_id=booking["id"]):
            logger.info("Booking created")
    """

    def __init__(self, logger: logging.Logger, **fields):
        self.logger = logger
        self.fields = fields

    def __enter__(self):
        _install_record_factory()
        _context_frames.set(_context_frames.get() + (self,))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _context_frames.set(tuple(f for f in _context_frames.get() if f is not self))
        return False
