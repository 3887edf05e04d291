"""
Logging for order-etl.

Stages attach order context to their log calls through ``extra``
(order_id, reasons, repairs, stage...). Both formatters here lift that
context out of the flat record: the JSON formatter nests it under an
"order" key and the text formatter appends it as key=value pairs.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "order-etl"

# extra keys that describe the order a log line is about, in display order
ORDER_CONTEXT_FIELDS = ("order_id", "kept_order_id", "order_ids", "stage", "reasons", "repairs")


def order_context(record: logging.LogRecord) -> dict:
    """Collect the order context fields present on a log record."""
    return {
        field: getattr(record, field)
        for field in ORDER_CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class OrderJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that groups order context under an "order" object.

    A rejection logged with extra={"order_id": 6, "reasons": ["INVALID_DATE"]}
    comes out as {"level": "WARNING", ..., "order": {"order_id": 6,
    "reasons": ["INVALID_DATE"]}}. Other extras stay at the top level.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        context = order_context(record)
        for field in context:
            log_record.pop(field, None)
        if context:
            log_record["order"] = context


class OrderTextFormatter(logging.Formatter):
    """Plain-text formatter that appends order context as key=value pairs."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = order_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={_text_value(value)}" for key, value in context.items())
        return f"{line} [{pairs}]"


def _text_value(value) -> str:
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(item) for item in value)
    return str(value)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Setup and configure a logger

    Args:
        name: Logger name
        level: Log level name (defaults to env var LOG_LEVEL or INFO)
        format_type: "json" or "text" (defaults to env var LOG_FORMAT or "json")

    Returns:
        Configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # stderr keeps stdout free for command output (e.g. the demo JSON)
    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(OrderJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
    else:
        handler.setFormatter(OrderTextFormatter(
            fmt="%(asctime)s %(levelname)-7s %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return the named logger, configuring it on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


class log_operation:
    """
    Context manager that logs the start, end and duration of a batch operation.

    The elapsed time stays available as ``duration`` after the block exits,
    whether or not it raised.

    Usage:
        with log_operation("Cleaning order batch", logger=logger, dry_run=False) as op:
            ...
        op.duration
    """

    def __init__(self, operation_name: str, logger: logging.Logger, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger
        self.extra_fields = extra_fields
        self.start_time = 0.0
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.time()
        self.logger.info(
            f"Starting: {self.operation_name}",
            extra={"operation": self.operation_name, **self.extra_fields}
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.time() - self.start_time
        extra = {
            "operation": self.operation_name,
            "duration_seconds": round(self.duration, 3),
            **self.extra_fields,
        }
        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra=extra)
        else:
            self.logger.error(
                f"Failed: {self.operation_name}: {exc_type.__name__}: {exc_val}",
                extra={**extra, "error_type": exc_type.__name__},
                exc_info=(exc_type, exc_val, exc_tb)
            )
        return False
